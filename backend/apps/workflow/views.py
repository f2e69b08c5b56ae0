# apps/workflow/views.py

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.responses import result_response
from . import actions
from .selectors import get_stage_counts
from .serializers import StageEntrySerializer, StageEntryCreateSerializer, StageMembershipSerializer


class WorkflowSummaryView(APIView):
    """GET /api/v1/workflow/: number of contacts in each stage."""

    def get(self, request):
        return Response(get_stage_counts())


class StageEntriesView(APIView):
    """
    Workflow table for one stage.

    GET  /api/v1/workflow/{stage}/   members with contact + latest communication
    POST /api/v1/workflow/{stage}/   create a contact directly in this stage
    """

    def get(self, request, stage):
        result = actions.list_by_stage(stage)
        return result_response(result, StageEntrySerializer, many=True)

    def post(self, request, stage):
        serializer = StageEntryCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        stage_data = data.pop("stage_data", None)
        result = actions.add_contact_to_stage(stage, data, stage_data)
        return result_response(result, StageMembershipSerializer, success_status=status.HTTP_201_CREATED)
