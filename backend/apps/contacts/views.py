# apps/contacts/views.py

from rest_framework import viewsets, status
from rest_framework.decorators import action

from apps.api.responses import result_response
from apps.communications.serializers import CommunicationCreateSerializer, CommunicationSerializer
from apps.workflow import actions
from apps.workflow.serializers import StageMembershipSerializer, TransitionSerializer
from .serializers import (
    ContactSerializer,
    ContactListSerializer,
    ContactDetailSerializer,
    ContactInputSerializer,
    ContactCreateSerializer,
)


class ContactViewSet(viewsets.ViewSet):
    """
    API endpoints for contacts.

    list:          GET    /api/v1/contacts/
    create:        POST   /api/v1/contacts/
    retrieve:      GET    /api/v1/contacts/{id}/
    partial:       PATCH  /api/v1/contacts/{id}/
    destroy:       DELETE /api/v1/contacts/{id}/
    communications POST   /api/v1/contacts/{id}/communications/
    transition:    POST   /api/v1/contacts/{id}/transition/
    overdue:       GET    /api/v1/contacts/overdue/
    """

    lookup_value_regex = "[0-9a-fA-F-]{32,36}"

    def list(self, request):
        search = request.query_params.get("search") or None
        result = actions.list_all_contacts(search=search)
        return result_response(result, ContactListSerializer, many=True)

    def create(self, request):
        serializer = ContactCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        initial_stage = data.pop("initial_stage", None)
        stage_data = data.pop("stage_data", None)
        result = actions.create_contact(data, initial_stage=initial_stage, stage_data=stage_data)
        return result_response(result, ContactSerializer, success_status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        result = actions.get_contact(pk)
        return result_response(result, ContactDetailSerializer)

    def partial_update(self, request, pk=None):
        serializer = ContactInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        result = actions.update_contact(pk, dict(serializer.validated_data))
        return result_response(result, ContactSerializer)

    def destroy(self, request, pk=None):
        result = actions.delete_contact(pk)
        return result_response(result, success_status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def communications(self, request, pk=None):
        """Log a communication for this contact."""
        payload = {**request.data, "contact_id": pk}
        serializer = CommunicationCreateSerializer(data=payload)
        serializer.is_valid(raise_exception=True)
        result = actions.add_communication(dict(serializer.validated_data))
        return result_response(result, CommunicationSerializer, success_status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def transition(self, request, pk=None):
        """Move this contact between workflow stages."""
        serializer = TransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = actions.transition_stage(
            pk,
            serializer.validated_data.get("from_stage"),
            serializer.validated_data["to_stage"],
            serializer.extra_fields(),
        )
        return result_response(result, StageMembershipSerializer)

    @action(detail=False, methods=["get"])
    def overdue(self, request):
        """Contacts whose latest follow-up date has passed."""
        result = actions.list_overdue_contacts()
        return result_response(result, ContactListSerializer, many=True)
