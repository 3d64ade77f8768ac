import django_filters

from collab_relay.tracking.models import TimeLog


class TimeLogFilter(django_filters.FilterSet):
    user_id = django_filters.CharFilter(field_name="user_id")
    domain = django_filters.CharFilter(field_name="domain", lookup_expr="iexact")
    date = django_filters.DateFromToRangeFilter(field_name="date")

    class Meta:
        model = TimeLog
        fields = ["user_id", "domain", "date"]
