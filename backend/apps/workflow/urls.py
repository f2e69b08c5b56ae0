# apps/workflow/urls.py

from django.urls import path, re_path

from apps.common.enums import WorkflowStage
from .views import WorkflowSummaryView, StageEntriesView

STAGE_PATTERN = "|".join(WorkflowStage.values)

urlpatterns = [
    path("", WorkflowSummaryView.as_view(), name="workflow-summary"),
    re_path(rf"^(?P<stage>{STAGE_PATTERN})/$", StageEntriesView.as_view(), name="workflow-stage"),
]
