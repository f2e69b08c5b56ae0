# apps/workflow/serializers.py

from rest_framework import serializers

from apps.common.enums import WorkflowStage
from apps.contacts.serializers import (
    ContactInputSerializer,
    ContactSerializer,
    LatestCommunicationMixin,
    StageDataSerializer,
)
from .models import StageMembership


class StageMembershipSerializer(serializers.ModelSerializer):
    """Membership row with only the attributes that belong to its stage."""

    contact_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = StageMembership
        fields = ["contact_id", "stage", "created_at"]
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        for name, value in instance.payload.items():
            if hasattr(value, "isoformat"):
                value = serializers.DateTimeField().to_representation(value)
            data[name] = value
        return data


class StageEntrySerializer(StageMembershipSerializer):
    """
    Workflow table row: stage attributes plus the contact and its latest
    communication details (annotated on the membership queryset).
    """
    contact = serializers.SerializerMethodField()

    class Meta(StageMembershipSerializer.Meta):
        fields = ["contact_id", "stage", "created_at", "contact"]
        read_only_fields = fields

    def get_contact(self, obj) -> dict:
        data = dict(ContactSerializer(obj.contact).data)
        data.update(LatestCommunicationMixin(obj).data)
        return data


class TransitionSerializer(StageDataSerializer):
    """Input for moving a contact between stages."""
    from_stage = serializers.ChoiceField(
        choices=WorkflowStage.choices,
        required=False,
        allow_null=True,
    )
    to_stage = serializers.ChoiceField(choices=WorkflowStage.choices)

    def extra_fields(self) -> dict:
        """Stage attributes supplied by the caller, without the stage names."""
        return {
            key: value for key, value in self.validated_data.items()
            if key not in ("from_stage", "to_stage")
        }


class StageEntryCreateSerializer(ContactInputSerializer):
    """Contact fields for a new contact created straight into a stage."""
    stage_data = StageDataSerializer(required=False)
