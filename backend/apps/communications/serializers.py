# apps/communications/serializers.py

from rest_framework import serializers

from .followups import follow_up_status, is_overdue
from .models import Communication


class CommunicationSerializer(serializers.ModelSerializer):
    """Full communication serializer."""

    follow_up_status = serializers.SerializerMethodField()
    is_overdue = serializers.SerializerMethodField()

    class Meta:
        model = Communication
        fields = [
            "id",
            "contact",
            "date",
            "contact_again_due_date",
            "next_steps",
            "notes",
            "follow_up_status",
            "is_overdue",
            "created_at",
        ]
        read_only_fields = fields

    def get_follow_up_status(self, obj) -> str:
        return follow_up_status(obj.contact_again_due_date)

    def get_is_overdue(self, obj) -> bool:
        return is_overdue(obj.contact_again_due_date)


class CommunicationCreateSerializer(serializers.Serializer):
    """Input for logging a communication."""
    contact_id = serializers.UUIDField()
    date = serializers.DateTimeField()
    notes = serializers.CharField(allow_blank=False, trim_whitespace=True)
    contact_again_due_date = serializers.DateField(required=False, allow_null=True)
    next_steps = serializers.CharField(required=False, allow_blank=True, allow_null=True)
