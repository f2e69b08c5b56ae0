import uuid

import pytest

from apps.common.enums import WayOfContact, WorkflowStage
from apps.common.errors import NotFound, TransitionError
from apps.common.results import OperationResult
from apps.communications.services import add_communication
from apps.contacts.models import Contact
from apps.workflow import actions
from apps.workflow.models import StageMembership
from apps.workflow.selectors import get_stage, get_stage_counts, get_stage_entries
from apps.workflow.services import (
    add_contact_to_clients,
    add_contact_to_contacted_contacts,
    add_contact_to_incoming_requests,
    add_contact_to_potentials,
    add_contact_to_stage,
    add_to_stage,
    convert_potential_to_incoming_request,
    is_transition_allowed,
    move_contact_workflow,
    move_contacted_to_client,
    move_incoming_request_to_contacted,
    move_potential_to_contacted,
    transition_stage,
)
from conftest import at


def memberships(contact):
    return list(StageMembership.objects.filter(contact=contact).values_list("stage", flat=True))


class TestTransitionPolicy:
    @pytest.mark.parametrize("from_stage,to_stage", [
        ("potentials", "incoming_requests"),
        ("potentials", "contacted_contacts"),
        ("incoming_requests", "contacted_contacts"),
        ("contacted_contacts", "clients"),
        (None, "clients"),
    ])
    def test_allowed(self, from_stage, to_stage):
        assert is_transition_allowed(from_stage, to_stage)

    @pytest.mark.parametrize("from_stage,to_stage", [
        ("potentials", "clients"),
        ("clients", "potentials"),
        ("incoming_requests", "potentials"),
        ("contacted_contacts", "incoming_requests"),
        ("potentials", "potentials"),
        (None, "archived"),
    ])
    def test_rejected(self, from_stage, to_stage):
        assert not is_transition_allowed(from_stage, to_stage)


@pytest.mark.django_db
class TestWorkflowEngine:
    def test_full_pipeline(self):
        contact, _ = add_contact_to_potentials({"name": "Contact A", "email": "a@x.com"})
        assert memberships(contact) == ["potentials"]

        incoming = convert_potential_to_incoming_request(contact.id, notes="called back")
        assert incoming.notes == "called back"
        assert incoming.date_of_request is not None

        contacted = move_incoming_request_to_contacted(contact.id, notes="spoke")
        assert contacted.initial_way_of_contact == "incoming/warm"

        client = move_contacted_to_client(contact.id, contract_number="CN-1")
        assert client.stage == WorkflowStage.CLIENTS
        assert client.contract_number == "CN-1"
        assert memberships(contact) == ["clients"]

    def test_potential_to_contacted_is_cold(self, contact):
        add_to_stage(contact.id, WorkflowStage.POTENTIALS)
        membership = move_potential_to_contacted(contact.id)
        assert membership.initial_way_of_contact == WayOfContact.OUTBOUND_COLD
        assert membership.notes == ""

    def test_illegal_move_rejected(self, contact):
        add_to_stage(contact.id, WorkflowStage.POTENTIALS)
        with pytest.raises(TransitionError) as exc:
            move_contact_workflow(contact.id, WorkflowStage.POTENTIALS, WorkflowStage.CLIENTS)
        assert exc.value.step == TransitionError.VALIDATE
        assert memberships(contact) == ["potentials"]

    def test_move_from_wrong_stage(self, contact):
        add_to_stage(contact.id, WorkflowStage.INCOMING_REQUESTS)
        with pytest.raises(TransitionError) as exc:
            move_potential_to_contacted(contact.id)
        assert exc.value.step == TransitionError.REMOVE
        assert exc.value.stage == WorkflowStage.POTENTIALS
        assert "Failed to remove from potentials" in exc.value.message
        assert memberships(contact) == ["incoming_requests"]

    def test_unassigned_contact_cannot_move(self, contact):
        with pytest.raises(TransitionError) as exc:
            convert_potential_to_incoming_request(contact.id)
        assert exc.value.step == TransitionError.REMOVE
        assert memberships(contact) == []

    def test_failed_insert_rolls_back_removal(self, contact):
        add_to_stage(contact.id, WorkflowStage.POTENTIALS)
        move_potential_to_contacted(contact.id)
        with pytest.raises(TransitionError) as exc:
            move_contacted_to_client(contact.id, contract_number="x" * 101)
        assert exc.value.step == TransitionError.ADD
        # The contacted row is still there
        assert memberships(contact) == ["contacted_contacts"]

    def test_missing_contact(self):
        with pytest.raises(NotFound):
            convert_potential_to_incoming_request(uuid.uuid4())

    def test_at_most_one_stage(self, contact):
        add_to_stage(contact.id, WorkflowStage.POTENTIALS)
        with pytest.raises(TransitionError) as exc:
            add_to_stage(contact.id, WorkflowStage.CLIENTS)
        assert exc.value.step == TransitionError.ADD
        assert "already in potentials" in exc.value.message
        assert memberships(contact) == ["potentials"]

    def test_payload_restricted_to_stage(self, contact):
        with pytest.raises(TransitionError):
            add_to_stage(contact.id, WorkflowStage.POTENTIALS, {"contract_number": "CN-9"})
        assert memberships(contact) == []

    def test_blank_payload_for_other_stage_dropped(self, contact):
        membership = add_to_stage(contact.id, WorkflowStage.POTENTIALS, {"notes": "", "contract_number": None})
        assert membership.stage == WorkflowStage.POTENTIALS
        assert membership.notes == ""
        assert membership.contract_number == ""

    def test_blank_extra_fields_on_named_move(self, contact):
        add_to_stage(contact.id, WorkflowStage.CONTACTED_CONTACTS)
        membership = transition_stage(
            contact.id,
            WorkflowStage.CONTACTED_CONTACTS,
            WorkflowStage.CLIENTS,
            {"contract_number": "CN-4", "notes": ""},
        )
        assert membership.contract_number == "CN-4"

    def test_entry_defaults(self, contact, other_contact):
        incoming = add_to_stage(contact.id, WorkflowStage.INCOMING_REQUESTS)
        contacted = add_to_stage(other_contact.id, WorkflowStage.CONTACTED_CONTACTS)
        assert incoming.date_of_request is not None
        assert contacted.initial_way_of_contact == WayOfContact.OUTBOUND_COLD

    def test_payload_property(self, contact):
        membership = add_to_stage(contact.id, WorkflowStage.CLIENTS, {"contract_number": "CN-2"})
        assert membership.payload == {"contract_number": "CN-2", "contract_conditions": ""}


@pytest.mark.django_db
class TestCreateAndEnter:
    def test_add_contact_to_each_stage(self):
        _, incoming = add_contact_to_incoming_requests({"name": "In", "email": "in@x.com"}, notes="web form")
        _, contacted = add_contact_to_contacted_contacts(
            {"name": "Warm", "email": "warm@x.com"},
            initial_way_of_contact=WayOfContact.INCOMING_WARM,
        )
        _, client = add_contact_to_clients(
            {"name": "Client", "email": "client@x.com"},
            contract_conditions="net 30",
            contract_number="CN-7",
        )
        assert incoming.stage == WorkflowStage.INCOMING_REQUESTS
        assert incoming.notes == "web form"
        assert contacted.initial_way_of_contact == WayOfContact.INCOMING_WARM
        assert client.contract_number == "CN-7"
        assert get_stage_counts() == {
            "potentials": 0,
            "incoming_requests": 1,
            "contacted_contacts": 1,
            "clients": 1,
        }

    def test_failed_stage_insert_leaves_no_contact(self):
        with pytest.raises(TransitionError):
            add_contact_to_stage(
                WorkflowStage.CONTACTED_CONTACTS,
                {"name": "Ghost", "email": "ghost@x.com"},
                {"initial_way_of_contact": "carrier pigeon"},
            )
        assert not Contact.objects.filter(email="ghost@x.com").exists()

    def test_unknown_stage(self):
        with pytest.raises(TransitionError):
            add_contact_to_stage("archived", {"name": "Nope", "email": "nope@x.com"})
        assert Contact.objects.count() == 0


@pytest.mark.django_db
class TestGenericTransition:
    def test_applies_policy_of_named_move(self, contact):
        add_to_stage(contact.id, WorkflowStage.INCOMING_REQUESTS)
        membership = transition_stage(
            contact.id, WorkflowStage.INCOMING_REQUESTS, WorkflowStage.CONTACTED_CONTACTS, {"notes": "hi"}
        )
        assert membership.initial_way_of_contact == WayOfContact.INCOMING_WARM

    def test_policy_fields_cannot_be_overridden(self, contact):
        add_to_stage(contact.id, WorkflowStage.POTENTIALS)
        with pytest.raises(TransitionError):
            transition_stage(
                contact.id,
                WorkflowStage.POTENTIALS,
                WorkflowStage.CONTACTED_CONTACTS,
                {"initial_way_of_contact": WayOfContact.INCOMING_WARM},
            )
        assert get_stage(contact.id) == WorkflowStage.POTENTIALS

    def test_enter_from_unassigned(self, contact):
        transition_stage(contact.id, None, WorkflowStage.POTENTIALS)
        assert get_stage(contact.id) == WorkflowStage.POTENTIALS


@pytest.mark.django_db
class TestStageEntries:
    def test_entries_carry_latest_communication(self, django_assert_num_queries):
        first, _ = add_contact_to_potentials({"name": "First", "email": "first@x.com"})
        add_contact_to_potentials({"name": "Second", "email": "second@x.com"})
        add_communication(first.id, date=at(2024, 1, 1), notes="a", next_steps="call again")

        with django_assert_num_queries(1):
            entries = {e.contact.name: e for e in get_stage_entries(WorkflowStage.POTENTIALS)}

        assert entries["First"].latest_next_steps == "call again"
        assert entries["Second"].latest_next_steps is None
        assert entries["Second"].communication_id is None


@pytest.mark.django_db
class TestActions:
    def test_success_result(self, contact):
        result = actions.transition_stage(contact.id, None, WorkflowStage.POTENTIALS)
        assert isinstance(result, OperationResult)
        assert result.success is True
        assert result.message == "Contact moved to potentials successfully."

    def test_transition_failure_result(self, contact):
        actions.transition_stage(contact.id, None, WorkflowStage.INCOMING_REQUESTS)
        result = actions.move_potential_to_contacted(contact.id)
        assert result.success is False
        assert result.error == "transition_error"
        assert result.step == "remove"
        assert result.to_dict()["step"] == "remove"

    def test_duplicate_email_result(self, contact, contact_data):
        result = actions.create_contact(contact_data)
        assert result.success is False
        assert result.error == "duplicate_email"
        assert result.message == "A contact with this email already exists."

    def test_create_with_initial_stage(self):
        result = actions.create_contact(
            {"name": "Staged", "email": "staged@x.com"},
            initial_stage=WorkflowStage.CLIENTS,
            stage_data={"contract_number": "CN-3"},
        )
        assert result.success is True
        assert get_stage(result.data.id) == WorkflowStage.CLIENTS

    def test_get_contact(self, contact):
        add_communication(contact.id, date=at(2024, 1, 1), notes="hello")
        result = actions.get_contact(contact.id)
        assert result.success is True
        assert result.data["contact"] == contact
        assert len(result.data["communications"]) == 1
        assert result.data["workflow_stage"] is None

    def test_get_missing_contact(self):
        result = actions.get_contact(uuid.uuid4())
        assert result.success is False
        assert result.error == "not_found"

    def test_invalid_reference_result(self):
        result = actions.add_communication({"contact_id": uuid.uuid4(), "date": at(2024, 1, 1), "notes": "x"})
        assert result.error == "invalid_reference"

    def test_list_by_unknown_stage(self):
        result = actions.list_by_stage("archived")
        assert result.success is False
        assert result.error == "transition_error"

    def test_communication_without_contact(self):
        result = actions.add_communication({"date": at(2024, 1, 1), "notes": "x"})
        assert isinstance(result, OperationResult)
        assert result.success is False
        assert result.error == "validation_error"
        assert "contact_id" in result.fields

    def test_communication_unknown_field(self, contact):
        result = actions.add_communication(
            {"contact_id": contact.id, "date": at(2024, 1, 1), "notes": "x", "subject": "hi"}
        )
        assert result.success is False
        assert result.error == "validation_error"
        assert result.fields == {"subject": ["Unknown field."]}
        assert "subject" in result.message

    def test_communication_notes_must_be_text(self, contact):
        result = actions.add_communication({"contact_id": contact.id, "date": at(2024, 1, 1), "notes": 5})
        assert result.success is False
        assert result.error == "validation_error"
        assert "notes" in result.fields

    def test_communication_bad_next_steps_and_date(self, contact):
        result = actions.add_communication(
            {"contact_id": contact.id, "date": 20240101, "notes": "x", "next_steps": ["call"]}
        )
        assert result.success is False
        assert set(result.fields) == {"date", "next_steps"}

    def test_blank_fields_of_other_stages_ignored(self):
        result = actions.add_contact_to_stage(
            WorkflowStage.POTENTIALS,
            {"name": "Form Fill", "email": "form@x.com"},
            {"notes": "", "contract_number": None, "date_of_request": None},
        )
        assert result.success is True
        assert result.data.stage == WorkflowStage.POTENTIALS
