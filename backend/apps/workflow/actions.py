# apps/workflow/actions.py

"""
Public operations consumed by the presentation layer.

Every function returns an ``OperationResult``; domain errors and storage
failures are caught here and reported with a message and an error code.
"""

import functools
import logging
from uuid import UUID

from django.db import DatabaseError

from apps.common.enums import WorkflowStage
from apps.common.errors import CRMError, NotFound, TransitionError
from apps.common.results import OperationResult
from apps.communications import services as communication_services
from apps.communications.selectors import get_communications_for_contact
from apps.contacts import selectors as contact_selectors
from apps.contacts import services as contact_services
from . import selectors, services

logger = logging.getLogger(__name__)


def operation(func):
    """Turn raised errors into failed results at the operation boundary."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> OperationResult:
        try:
            return func(*args, **kwargs)
        except CRMError as e:
            logger.info(f"{func.__name__} failed: {e.code}: {e.message}")
            return OperationResult.fail(e)
        except DatabaseError as e:
            logger.exception(f"{func.__name__} hit a storage error")
            return OperationResult(
                success=False,
                message=f"Storage error: {e}",
                error="storage_error",
            )
    return wrapper


def _check_stage(stage: str) -> None:
    if stage not in WorkflowStage.values:
        raise TransitionError(f"Unknown stage: {stage}", stage=stage)


# === Reads ===

@operation
def list_by_stage(stage: str) -> OperationResult:
    _check_stage(stage)
    entries = list(selectors.get_stage_entries(stage))
    return OperationResult.ok(f"{len(entries)} contacts in {stage}.", entries)


@operation
def list_all_contacts(search: str | None = None) -> OperationResult:
    if search:
        contacts = list(contact_selectors.search_contacts(search))
    else:
        contacts = list(contact_selectors.get_contacts_with_latest_communication())
    return OperationResult.ok(f"{len(contacts)} contacts.", contacts)


@operation
def list_overdue_contacts() -> OperationResult:
    contacts = list(contact_selectors.get_overdue_contacts())
    return OperationResult.ok(f"{len(contacts)} overdue follow-ups.", contacts)


@operation
def get_contact(contact_id: UUID | str) -> OperationResult:
    contact = contact_selectors.get_contact_by_id(contact_id)
    if contact is None:
        raise NotFound("Contact", contact_id)
    return OperationResult.ok(
        "Contact found.",
        {
            "contact": contact,
            "communications": list(get_communications_for_contact(contact.id)),
            "workflow_stage": contact_selectors.get_contact_stage(contact),
        },
    )


# === Writes ===

@operation
def create_contact(
    data: dict,
    initial_stage: str | None = None,
    stage_data: dict | None = None,
) -> OperationResult:
    if initial_stage:
        contact, _ = services.add_contact_to_stage(initial_stage, data, stage_data)
    else:
        contact = contact_services.create_contact(**data)
    return OperationResult.ok("Contact added successfully.", contact)


@operation
def update_contact(contact_id: UUID | str, data: dict) -> OperationResult:
    contact = contact_services.update_contact(contact_id, **data)
    return OperationResult.ok("Contact updated successfully.", contact)


@operation
def delete_contact(contact_id: UUID | str) -> OperationResult:
    contact_services.delete_contact(contact_id)
    return OperationResult.ok("Contact deleted successfully.")


@operation
def add_communication(data: dict) -> OperationResult:
    values = communication_services.clean_communication_data(data)
    comm = communication_services.add_communication(**values)
    return OperationResult.ok("Communication added successfully.", comm)


@operation
def transition_stage(
    contact_id: UUID | str,
    from_stage: str | None,
    to_stage: str,
    extra: dict | None = None,
) -> OperationResult:
    membership = services.transition_stage(contact_id, from_stage, to_stage, extra)
    return OperationResult.ok(f"Contact moved to {to_stage} successfully.", membership)


# Named moves with their fixed policies

@operation
def convert_potential_to_incoming_request(contact_id, notes: str | None = None) -> OperationResult:
    membership = services.convert_potential_to_incoming_request(contact_id, notes=notes)
    return OperationResult.ok("Contact moved to incoming_requests successfully.", membership)


@operation
def move_potential_to_contacted(contact_id, notes: str | None = None) -> OperationResult:
    membership = services.move_potential_to_contacted(contact_id, notes=notes)
    return OperationResult.ok("Contact moved to contacted_contacts successfully.", membership)


@operation
def move_incoming_request_to_contacted(contact_id, notes: str | None = None) -> OperationResult:
    membership = services.move_incoming_request_to_contacted(contact_id, notes=notes)
    return OperationResult.ok("Contact moved to contacted_contacts successfully.", membership)


@operation
def move_contacted_to_client(
    contact_id,
    contract_number: str | None = None,
    contract_conditions: str | None = None,
) -> OperationResult:
    membership = services.move_contacted_to_client(
        contact_id,
        contract_number=contract_number,
        contract_conditions=contract_conditions,
    )
    return OperationResult.ok("Contact moved to clients successfully.", membership)


@operation
def add_contact_to_stage(stage: str, contact_data: dict, stage_data: dict | None = None) -> OperationResult:
    _, membership = services.add_contact_to_stage(stage, contact_data, stage_data)
    return OperationResult.ok(f"Contact added to {stage} successfully.", membership)
