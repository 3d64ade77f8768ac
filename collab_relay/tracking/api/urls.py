from django.urls import path

from .views import AnalyticsView
from .views import ClassificationsView
from .views import TrackTimeView

# The extension posts to `/api/track-time` without a trailing slash.
urlpatterns = [
    path("track-time/", TrackTimeView.as_view(), name="track-time"),
    path("track-time", TrackTimeView.as_view(), name="track-time-noslash"),
    path("analytics/<str:user_id>/", AnalyticsView.as_view(), name="analytics"),
    path(
        "analytics/<str:user_id>",
        AnalyticsView.as_view(),
        name="analytics-noslash",
    ),
    path(
        "classifications/<str:user_id>/",
        ClassificationsView.as_view(),
        name="classifications",
    ),
    path(
        "classifications/<str:user_id>",
        ClassificationsView.as_view(),
        name="classifications-noslash",
    ),
]
