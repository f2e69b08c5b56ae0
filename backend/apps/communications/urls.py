# apps/communications/urls.py

from rest_framework.routers import SimpleRouter
from .views import CommunicationViewSet

router = SimpleRouter()
router.register(r"communications", CommunicationViewSet, basename="communication")

urlpatterns = router.urls
