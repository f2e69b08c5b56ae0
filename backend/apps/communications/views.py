# apps/communications/views.py

from rest_framework import viewsets, status

from apps.api.responses import result_response
from apps.workflow import actions
from .serializers import CommunicationCreateSerializer, CommunicationSerializer


class CommunicationViewSet(viewsets.ViewSet):
    """
    Append-only communication log.

    create:  POST /api/v1/communications/
    """

    def create(self, request):
        serializer = CommunicationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = actions.add_communication(dict(serializer.validated_data))
        return result_response(result, CommunicationSerializer, success_status=status.HTTP_201_CREATED)
