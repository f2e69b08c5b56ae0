# apps/contacts/serializers.py

from rest_framework import serializers

from apps.common.enums import WayOfContact, WorkflowStage
from apps.communications.followups import follow_up_status, is_overdue
from apps.communications.serializers import CommunicationSerializer
from .models import Contact


CONTACT_FIELDS = [
    "id",
    "name",
    "email",
    "telephone",
    "company",
    "address",
    "product_interest",
    "notes",
    "next_steps",
    "created_at",
    "updated_at",
]


class ContactSerializer(serializers.ModelSerializer):
    """Full contact serializer with all profile fields."""

    class Meta:
        model = Contact
        fields = CONTACT_FIELDS
        read_only_fields = ["id", "created_at", "updated_at"]


class LatestCommunicationMixin(serializers.Serializer):
    """
    Latest communication fields plus the follow-up classification.
    Expects instances annotated by ``with_latest_communication``.
    """
    latest_next_steps = serializers.CharField(read_only=True, allow_null=True, default=None)
    latest_contact_again_due_date = serializers.DateField(read_only=True, allow_null=True, default=None)
    communication_id = serializers.UUIDField(read_only=True, allow_null=True, default=None)
    communication_date = serializers.DateTimeField(read_only=True, allow_null=True, default=None)
    follow_up_status = serializers.SerializerMethodField()
    is_overdue = serializers.SerializerMethodField()

    def _due(self, obj):
        return getattr(obj, "latest_contact_again_due_date", None)

    def get_follow_up_status(self, obj) -> str:
        return follow_up_status(self._due(obj))

    def get_is_overdue(self, obj) -> bool:
        return is_overdue(self._due(obj))


class ContactListSerializer(LatestCommunicationMixin, serializers.ModelSerializer):
    """Contact with its latest communication details, for list views."""

    class Meta:
        model = Contact
        fields = CONTACT_FIELDS + [
            "latest_next_steps",
            "latest_contact_again_due_date",
            "communication_id",
            "communication_date",
            "follow_up_status",
            "is_overdue",
        ]


class ContactDetailSerializer(serializers.Serializer):
    """Contact, its full communication history and current stage."""
    contact = ContactSerializer()
    communications = CommunicationSerializer(many=True)
    workflow_stage = serializers.CharField(allow_null=True)


class ContactInputSerializer(serializers.Serializer):
    """Validates contact fields for create and partial update."""
    name = serializers.CharField(min_length=2, max_length=255)
    email = serializers.EmailField(max_length=254)
    telephone = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)
    company = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    product_interest = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    next_steps = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class StageDataSerializer(serializers.Serializer):
    """Stage-specific attributes supplied when a contact enters a stage."""
    date_of_request = serializers.DateTimeField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    initial_way_of_contact = serializers.ChoiceField(
        choices=WayOfContact.choices,
        required=False,
    )
    contract_number = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    contract_conditions = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ContactCreateSerializer(ContactInputSerializer):
    """Contact fields plus an optional stage to start in."""
    initial_stage = serializers.ChoiceField(
        choices=WorkflowStage.choices,
        required=False,
        allow_null=True,
    )
    stage_data = StageDataSerializer(required=False)

    def validate(self, attrs):
        if attrs.get("stage_data") and not attrs.get("initial_stage"):
            raise serializers.ValidationError({"stage_data": "Requires initial_stage."})
        return attrs
