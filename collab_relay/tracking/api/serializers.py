from __future__ import annotations

from django.conf import settings
from rest_framework import serializers

from collab_relay.tracking.models import TimeLog


class JSONNumberIntegerField(serializers.IntegerField):
    """Integer field that only accepts JSON numbers, not numeric strings."""

    default_error_messages = {
        "not_a_number": "A number is required.",
    }

    def to_internal_value(self, data):
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            self.fail("not_a_number")
        return super().to_internal_value(data)


class TrackTimeSerializer(serializers.Serializer):
    """Payload posted by the browser extension.

    Field names follow the extension (camelCase). ``userId`` is optional
    until authentication exists; it falls back to
    ``settings.TRACKING_DEFAULT_USER_ID``.
    """

    date = serializers.DateField(input_formats=["%Y-%m-%d"])
    domain = serializers.CharField(max_length=255)
    durationMs = JSONNumberIntegerField(  # noqa: N815
        source="duration_ms", min_value=0
    )
    userId = serializers.CharField(  # noqa: N815
        source="user_id", max_length=255, required=False, allow_blank=True
    )

    def validate_domain(self, value: str) -> str:
        value = value.strip().lower()
        if not value:
            msg = "Domain must not be blank."
            raise serializers.ValidationError(msg)
        return value

    def validate(self, attrs: dict) -> dict:
        if not attrs.get("user_id"):
            attrs["user_id"] = settings.TRACKING_DEFAULT_USER_ID
        return attrs


class TimeLogSerializer(serializers.ModelSerializer):
    durationMs = serializers.IntegerField(  # noqa: N815
        source="duration_ms", read_only=True
    )
    userId = serializers.CharField(source="user_id", read_only=True)  # noqa: N815

    class Meta:
        model = TimeLog
        fields = ("id", "userId", "domain", "date", "durationMs", "updated_at")
        read_only_fields = fields


class ClassificationsSerializer(serializers.Serializer):
    productive = serializers.ListField(
        child=serializers.CharField(max_length=255), allow_empty=True
    )
    unproductive = serializers.ListField(
        child=serializers.CharField(max_length=255), allow_empty=True
    )

    def _normalize(self, value: list[str]) -> list[str]:
        cleaned = [v.strip().lower() for v in value]
        return [v for v in cleaned if v]

    def validate_productive(self, value: list[str]) -> list[str]:
        return self._normalize(value)

    def validate_unproductive(self, value: list[str]) -> list[str]:
        return self._normalize(value)


class AnalyticsBucketSerializer(serializers.Serializer):
    date = serializers.CharField()
    totalTime = serializers.IntegerField()  # noqa: N815
    productiveTime = serializers.IntegerField()  # noqa: N815
    unproductiveTime = serializers.IntegerField()  # noqa: N815


class AnalyticsDomainSerializer(serializers.Serializer):
    domain = serializers.CharField()
    durationMs = serializers.IntegerField()  # noqa: N815
    category = serializers.CharField()


class AnalyticsSerializer(serializers.Serializer):
    """Documents the analytics report shape for the API schema."""

    userId = serializers.CharField()  # noqa: N815
    totalTime = serializers.IntegerField()  # noqa: N815
    productiveTime = serializers.IntegerField()  # noqa: N815
    unproductiveTime = serializers.IntegerField()  # noqa: N815
    neutralTime = serializers.IntegerField()  # noqa: N815
    byDate = AnalyticsBucketSerializer(many=True)  # noqa: N815
    topDomains = AnalyticsDomainSerializer(many=True)  # noqa: N815
