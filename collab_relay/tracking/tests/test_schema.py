from http import HTTPStatus

import pytest
from django.urls import resolve
from django.urls import reverse
from drf_spectacular.generators import SchemaGenerator


def test_tracking_routes_available_unversioned_and_v1():
    assert reverse("api_v1:track-time") == "/api/v1/track-time/"
    assert reverse("api:track-time-noslash") == "/api/track-time"
    assert resolve("/api/v1/time-logs/").view_name == "api_v1:time-logs-list"
    assert resolve("/api/analytics/u1").view_name == "api:analytics-noslash"


def test_schema_docs_available_under_v1():
    assert resolve("/api/v1/schema/").view_name == "api-schema-v1"
    assert resolve("/api/v1/docs/").view_name == "api-docs-v1"


def test_schema_tag_grouping(db):
    schema = SchemaGenerator().get_schema(request=None, public=True)
    paths = schema["paths"]

    def first_tags(path):
        return next(iter(paths[path].values()))["tags"]

    assert first_tags("/api/v1/track-time/") == ["Time Tracking"]
    assert first_tags("/api/v1/time-logs/") == ["Time Tracking"]
    assert first_tags("/api/v1/classifications/{user_id}/") == [
        "Site Classifications"
    ]
    assert first_tags("/api/v1/analytics/{user_id}/") == ["Analytics"]
    declared = {tag["name"] for tag in schema["tags"]}
    assert {"Time Tracking", "Site Classifications", "Analytics"} <= declared


def test_api_v1_docs_accessible_by_admin(admin_client):
    response = admin_client.get(reverse("api-docs-v1"))
    assert response.status_code == HTTPStatus.OK


@pytest.mark.django_db
def test_api_v1_docs_not_accessible_by_anonymous_users(client):
    response = client.get(reverse("api-docs-v1"))
    assert response.status_code == HTTPStatus.FORBIDDEN


def test_api_v1_schema_generated_successfully(admin_client):
    response = admin_client.get(reverse("api-schema-v1"))
    assert response.status_code == HTTPStatus.OK
