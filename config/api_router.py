from django.conf import settings
from django.urls import include
from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from collab_relay.tracking.api.views import TimeLogViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("time-logs", TimeLogViewSet, basename="time-logs")


app_name = "api"
urlpatterns = [
    path("", include("collab_relay.tracking.api.urls")),
    *router.urls,
]
