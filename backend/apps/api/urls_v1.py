# apps/api/urls_v1.py

from django.urls import path, include

urlpatterns = [
    path("", include("apps.contacts.urls")),
    path("", include("apps.communications.urls")),
    path("workflow/", include("apps.workflow.urls")),
]
