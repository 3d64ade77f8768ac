from __future__ import annotations

import logging

from django.db import DatabaseError
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet
from rest_framework.views import APIView

from collab_relay.tracking import services
from collab_relay.tracking.models import TimeLog

from .filters import TimeLogFilter
from .serializers import AnalyticsSerializer
from .serializers import ClassificationsSerializer
from .serializers import TimeLogSerializer
from .serializers import TrackTimeSerializer

logger = logging.getLogger(__name__)


class TrackTimeView(APIView):
    """Receive a tracking delta from the browser extension.

    There is no authentication yet; the user comes from the payload or the
    configured default user.
    """

    permission_classes = [AllowAny]
    authentication_classes: list = []

    @extend_schema(
        tags=["Time Tracking"],
        request=TrackTimeSerializer,
        responses={200: None, 400: None, 500: None},
    )
    def post(self, request):
        serializer = TrackTimeSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"message": "Missing required data.", "errors": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        data = serializer.validated_data

        logger.info(
            "Received tracking data for user %s: %s on %s for %sms",
            data["user_id"],
            data["domain"],
            data["date"],
            data["duration_ms"],
        )
        try:
            services.record_time(
                data["user_id"],
                data["domain"],
                data["date"],
                data["duration_ms"],
            )
        except DatabaseError:
            logger.exception("Error saving time tracking data")
            return Response(
                {"message": "Failed to save time tracking data."},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response(
            {"message": "Time tracking data saved successfully."},
            status=status.HTTP_200_OK,
        )


class AnalyticsView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    @extend_schema(tags=["Analytics"], responses=AnalyticsSerializer)
    def get(self, request, user_id: str):
        try:
            report = services.build_analytics(user_id)
        except DatabaseError:
            logger.exception("Error fetching analytics data")
            return Response(
                {"message": "Failed to fetch analytics data."},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response(report, status=status.HTTP_200_OK)


class ClassificationsView(APIView):
    """Productive/unproductive site lists for one user (options page)."""

    permission_classes = [AllowAny]
    authentication_classes: list = []

    @extend_schema(tags=["Site Classifications"], responses=ClassificationsSerializer)
    def get(self, request, user_id: str):
        return Response(services.get_classifications(user_id))

    @extend_schema(
        tags=["Site Classifications"],
        request=ClassificationsSerializer,
        responses=ClassificationsSerializer,
    )
    def put(self, request, user_id: str):
        serializer = ClassificationsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            result = services.replace_classifications(
                user_id,
                serializer.validated_data["productive"],
                serializer.validated_data["unproductive"],
            )
        except services.ClassificationConflictError as exc:
            return Response(
                {"detail": str(exc), "domains": exc.domains},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(result, status=status.HTTP_200_OK)


@extend_schema_view(
    list=extend_schema(tags=["Time Tracking"]),
    retrieve=extend_schema(tags=["Time Tracking"]),
)
class TimeLogViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    GenericViewSet,
):
    queryset = TimeLog.objects.all()
    serializer_class = TimeLogSerializer
    permission_classes = [AllowAny]
    authentication_classes: list = []
    filter_backends = [DjangoFilterBackend]
    filterset_class = TimeLogFilter
