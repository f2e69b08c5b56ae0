# apps/workflow/services.py

"""
Workflow stage engine.

A contact sits in at most one of four stages. The only legal moves are

    potentials         -> incoming_requests
    potentials         -> contacted_contacts  (always "outbound/cold")
    incoming_requests  -> contacted_contacts  (always "incoming/warm")
    contacted_contacts -> clients

plus entering any stage from the unassigned state. Every move runs in one
transaction with the contact row locked, so a failed move leaves the
contact exactly where it was.
"""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from apps.common.enums import WorkflowStage, WayOfContact
from apps.common.errors import TransitionError, ValidationError
from apps.contacts.models import Contact
from apps.contacts.services import create_contact, get_contact_or_raise
from .models import StageMembership, STAGE_FIELDS

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS: frozenset[tuple[str, str]] = frozenset({
    (WorkflowStage.POTENTIALS, WorkflowStage.INCOMING_REQUESTS),
    (WorkflowStage.POTENTIALS, WorkflowStage.CONTACTED_CONTACTS),
    (WorkflowStage.INCOMING_REQUESTS, WorkflowStage.CONTACTED_CONTACTS),
    (WorkflowStage.CONTACTED_CONTACTS, WorkflowStage.CLIENTS),
})


def is_transition_allowed(from_stage: str | None, to_stage: str) -> bool:
    if to_stage not in WorkflowStage.values:
        return False
    if from_stage is None:
        return True
    return (from_stage, to_stage) in ALLOWED_TRANSITIONS


def _check_stage_data(to_stage: str, data: dict) -> dict:
    allowed = STAGE_FIELDS[to_stage]
    # Blank values for another stage's fields carry nothing and are dropped
    unexpected = {key for key, value in data.items() if key not in allowed and value not in (None, "")}
    if unexpected:
        raise TransitionError(
            f"Fields not allowed for {to_stage}: {', '.join(sorted(unexpected))}",
            stage=to_stage,
            step=TransitionError.VALIDATE,
        )
    # Optional text payloads are stored as ""
    return {
        key: ("" if value is None and key != "date_of_request" else value)
        for key, value in data.items()
        if key in allowed
    }


def _insert_membership(contact: Contact, stage: str, data: dict) -> StageMembership:
    membership = StageMembership(contact=contact, stage=stage, **data)
    try:
        membership.full_clean(exclude=["contact"])
    except DjangoValidationError as e:
        invalid = ValidationError.from_django(e)
        raise TransitionError(
            f"Failed to move to {stage}: {invalid.message}",
            stage=stage,
            step=TransitionError.ADD,
        ) from e
    try:
        with transaction.atomic():
            membership.save(force_insert=True)
    except IntegrityError as e:
        current = (
            StageMembership.objects.filter(contact=contact)
            .values_list("stage", flat=True)
            .first()
        )
        raise TransitionError(
            f"Failed to move to {stage}: contact is already in {current or 'a stage'}",
            stage=stage,
            step=TransitionError.ADD,
        ) from e
    return membership


def move_contact_workflow(
    contact_id: UUID | str,
    from_stage: str | None,
    to_stage: str,
    to_stage_data: dict | None = None,
) -> StageMembership:
    """
    Move a contact from ``from_stage`` to ``to_stage`` atomically.

    With ``from_stage=None`` the contact must currently be unassigned.

    Raises:
        TransitionError: the pair is not a legal move (step "validate"), the
            contact is not in ``from_stage`` (step "remove"), or the new
            membership could not be stored (step "add").
        NotFound: the contact does not exist.
    """
    if not is_transition_allowed(from_stage, to_stage):
        logger.warning(f"Rejected transition {from_stage} -> {to_stage} for {contact_id}")
        raise TransitionError(
            f"Moving from {from_stage or 'no stage'} to {to_stage} is not allowed",
            stage=to_stage,
            step=TransitionError.VALIDATE,
        )
    data = _check_stage_data(to_stage, to_stage_data or {})

    with transaction.atomic():
        # Serializes concurrent moves of the same contact
        contact = get_contact_or_raise(contact_id, for_update=True)

        if from_stage is not None:
            try:
                deleted, _ = StageMembership.objects.filter(
                    contact=contact, stage=from_stage
                ).delete()
            except DatabaseError as e:
                raise TransitionError(
                    f"Failed to remove from {from_stage}: {e}",
                    stage=from_stage,
                    step=TransitionError.REMOVE,
                ) from e
            if not deleted:
                raise TransitionError(
                    f"Failed to remove from {from_stage}: contact is not in {from_stage}",
                    stage=from_stage,
                    step=TransitionError.REMOVE,
                )

        membership = _insert_membership(contact, to_stage, data)

    logger.info(f"Moved contact {contact.id}: {from_stage or 'unassigned'} -> {to_stage}")
    return membership


def _with_entry_defaults(stage: str, stage_data: dict | None) -> dict:
    # Entering a stage directly gets the same defaults the named moves use
    data = dict(stage_data or {})
    if stage == WorkflowStage.INCOMING_REQUESTS and not data.get("date_of_request"):
        data["date_of_request"] = timezone.now()
    if stage == WorkflowStage.CONTACTED_CONTACTS and not data.get("initial_way_of_contact"):
        data["initial_way_of_contact"] = WayOfContact.OUTBOUND_COLD
    return data


def add_to_stage(contact_id: UUID | str, stage: str, stage_data: dict | None = None) -> StageMembership:
    """Place an unassigned contact into a stage."""
    return move_contact_workflow(contact_id, None, stage, _with_entry_defaults(stage, stage_data))


def add_contact_to_stage(
    stage: str,
    contact_data: dict,
    stage_data: dict | None = None,
) -> tuple[Contact, StageMembership]:
    """Create a contact and put it into ``stage``; both or neither are stored."""
    if stage not in WorkflowStage.values:
        raise TransitionError(f"Unknown stage: {stage}", stage=stage, step=TransitionError.VALIDATE)
    with transaction.atomic():
        contact = create_contact(**contact_data)
        membership = add_to_stage(contact.id, stage, stage_data)
    return contact, membership


# === Named transitions ===

def convert_potential_to_incoming_request(contact_id, notes: str | None = None) -> StageMembership:
    return move_contact_workflow(
        contact_id,
        WorkflowStage.POTENTIALS,
        WorkflowStage.INCOMING_REQUESTS,
        {"notes": notes, "date_of_request": timezone.now()},
    )


def move_potential_to_contacted(contact_id, notes: str | None = None) -> StageMembership:
    # Potentials were never in touch with us: cold outreach
    return move_contact_workflow(
        contact_id,
        WorkflowStage.POTENTIALS,
        WorkflowStage.CONTACTED_CONTACTS,
        {"notes": notes, "initial_way_of_contact": WayOfContact.OUTBOUND_COLD},
    )


def move_incoming_request_to_contacted(contact_id, notes: str | None = None) -> StageMembership:
    # They came to us: warm
    return move_contact_workflow(
        contact_id,
        WorkflowStage.INCOMING_REQUESTS,
        WorkflowStage.CONTACTED_CONTACTS,
        {"notes": notes, "initial_way_of_contact": WayOfContact.INCOMING_WARM},
    )


def move_contacted_to_client(
    contact_id,
    contract_number: str | None = None,
    contract_conditions: str | None = None,
) -> StageMembership:
    return move_contact_workflow(
        contact_id,
        WorkflowStage.CONTACTED_CONTACTS,
        WorkflowStage.CLIENTS,
        {"contract_number": contract_number, "contract_conditions": contract_conditions},
    )


# === Create-and-enter ===

def add_contact_to_potentials(contact_data: dict) -> tuple[Contact, StageMembership]:
    return add_contact_to_stage(WorkflowStage.POTENTIALS, contact_data)


def add_contact_to_incoming_requests(
    contact_data: dict,
    notes: str | None = None,
) -> tuple[Contact, StageMembership]:
    return add_contact_to_stage(
        WorkflowStage.INCOMING_REQUESTS,
        contact_data,
        {"notes": notes, "date_of_request": timezone.now()},
    )


def add_contact_to_contacted_contacts(
    contact_data: dict,
    notes: str | None = None,
    initial_way_of_contact: str = WayOfContact.OUTBOUND_COLD,
) -> tuple[Contact, StageMembership]:
    return add_contact_to_stage(
        WorkflowStage.CONTACTED_CONTACTS,
        contact_data,
        {"notes": notes, "initial_way_of_contact": initial_way_of_contact},
    )


def add_contact_to_clients(
    contact_data: dict,
    contract_conditions: str | None = None,
    contract_number: str | None = None,
) -> tuple[Contact, StageMembership]:
    return add_contact_to_stage(
        WorkflowStage.CLIENTS,
        contact_data,
        {"contract_number": contract_number, "contract_conditions": contract_conditions},
    )


# === Generic entry point ===

# Named move for each legal pair, and the caller fields each one accepts
NAMED_TRANSITIONS = {
    (WorkflowStage.POTENTIALS, WorkflowStage.INCOMING_REQUESTS):
        (convert_potential_to_incoming_request, ("notes",)),
    (WorkflowStage.POTENTIALS, WorkflowStage.CONTACTED_CONTACTS):
        (move_potential_to_contacted, ("notes",)),
    (WorkflowStage.INCOMING_REQUESTS, WorkflowStage.CONTACTED_CONTACTS):
        (move_incoming_request_to_contacted, ("notes",)),
    (WorkflowStage.CONTACTED_CONTACTS, WorkflowStage.CLIENTS):
        (move_contacted_to_client, ("contract_number", "contract_conditions")),
}


def transition_stage(
    contact_id: UUID | str,
    from_stage: str | None,
    to_stage: str,
    extra: dict | None = None,
) -> StageMembership:
    """
    Move a contact between stages, applying the fixed policy of the move.

    ``from_stage=None`` enters ``to_stage`` from the unassigned state.
    Policy fields (date of request, way of contact) are set by the move
    itself and cannot be supplied by the caller.
    """
    extra = extra or {}
    if from_stage is None:
        return add_to_stage(contact_id, to_stage, extra)

    named = NAMED_TRANSITIONS.get((from_stage, to_stage))
    if named is None:
        logger.warning(f"Rejected transition {from_stage} -> {to_stage} for {contact_id}")
        raise TransitionError(
            f"Moving from {from_stage} to {to_stage} is not allowed",
            stage=to_stage,
            step=TransitionError.VALIDATE,
        )
    move, accepted = named
    unexpected = {key for key, value in extra.items() if key not in accepted and value not in (None, "")}
    if unexpected:
        raise TransitionError(
            f"Fields not accepted when moving {from_stage} -> {to_stage}: "
            f"{', '.join(sorted(unexpected))}",
            stage=to_stage,
            step=TransitionError.VALIDATE,
        )
    return move(contact_id, **{key: value for key, value in extra.items() if key in accepted})
