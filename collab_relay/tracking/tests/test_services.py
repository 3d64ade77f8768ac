import datetime as dt

import pytest

from collab_relay.tracking import services
from collab_relay.tracking.models import SiteClassification
from collab_relay.tracking.models import TimeLog

DAY_1 = dt.date(2024, 5, 1)
DAY_2 = dt.date(2024, 5, 2)


@pytest.mark.django_db
class TestRecordTime:
    def test_first_report_creates_row(self):
        log = services.record_time("u1", "github.com", DAY_1, 1500)
        assert log.duration_ms == 1500  # noqa: PLR2004
        assert TimeLog.objects.count() == 1

    def test_repeated_reports_are_accumulated(self):
        services.record_time("u1", "github.com", DAY_1, 1000)
        log = services.record_time("u1", "github.com", DAY_1, 250)

        assert log.duration_ms == 1250  # noqa: PLR2004
        assert TimeLog.objects.count() == 1

    def test_user_domain_and_day_are_separate_keys(self):
        services.record_time("u1", "github.com", DAY_1, 1)
        services.record_time("u1", "github.com", DAY_2, 1)
        services.record_time("u1", "youtube.com", DAY_1, 1)
        services.record_time("u2", "github.com", DAY_1, 1)
        assert TimeLog.objects.count() == 4  # noqa: PLR2004


@pytest.mark.django_db
class TestClassifications:
    def test_replace_is_wholesale(self):
        services.replace_classifications("u1", ["github.com"], ["facebook.com"])
        result = services.replace_classifications("u1", ["leetcode.com"], [])

        assert result == {"productive": ["leetcode.com"], "unproductive": []}
        assert SiteClassification.objects.filter(user_id="u1").count() == 1

    def test_duplicates_within_a_list_collapse(self):
        result = services.replace_classifications(
            "u1", ["github.com", "github.com"], []
        )
        assert result["productive"] == ["github.com"]

    def test_domain_in_both_lists_is_rejected(self):
        services.replace_classifications("u1", ["github.com"], [])

        with pytest.raises(services.ClassificationConflictError) as exc_info:
            services.replace_classifications(
                "u1", ["github.com", "x.com"], ["x.com", "github.com"]
            )

        assert exc_info.value.domains == ["github.com", "x.com"]
        # Previous lists are untouched.
        assert services.get_classifications("u1") == {
            "productive": ["github.com"],
            "unproductive": [],
        }

    def test_users_do_not_share_lists(self):
        services.replace_classifications("u1", ["github.com"], [])
        assert services.get_classifications("u2") == {
            "productive": [],
            "unproductive": [],
        }


@pytest.mark.django_db
class TestBuildAnalytics:
    def test_unknown_user_has_zero_totals(self):
        report = services.build_analytics("nobody")
        assert report == {
            "userId": "nobody",
            "totalTime": 0,
            "productiveTime": 0,
            "unproductiveTime": 0,
            "neutralTime": 0,
            "byDate": [],
            "topDomains": [],
        }

    def test_totals_follow_exact_domain_classification(self):
        services.replace_classifications("u1", ["github.com"], ["youtube.com"])
        services.record_time("u1", "github.com", DAY_1, 3000)
        services.record_time("u1", "youtube.com", DAY_1, 1000)
        services.record_time("u1", "gist.github.com", DAY_2, 500)
        services.record_time("u2", "github.com", DAY_1, 99999)

        report = services.build_analytics("u1")

        assert report["totalTime"] == 4500  # noqa: PLR2004
        assert report["productiveTime"] == 3000  # noqa: PLR2004
        assert report["unproductiveTime"] == 1000  # noqa: PLR2004
        assert report["neutralTime"] == 500  # noqa: PLR2004
        assert report["byDate"] == [
            {
                "date": "2024-05-01",
                "totalTime": 4000,
                "productiveTime": 3000,
                "unproductiveTime": 1000,
            },
            {
                "date": "2024-05-02",
                "totalTime": 500,
                "productiveTime": 0,
                "unproductiveTime": 0,
            },
        ]
        assert report["topDomains"] == [
            {"domain": "github.com", "durationMs": 3000, "category": "productive"},
            {"domain": "youtube.com", "durationMs": 1000, "category": "unproductive"},
            {"domain": "gist.github.com", "durationMs": 500, "category": "neutral"},
        ]

    def test_top_domains_are_capped(self):
        for i in range(services.TOP_DOMAINS_LIMIT + 3):
            services.record_time("u1", f"site{i}.com", DAY_1, i + 1)

        report = services.build_analytics("u1")

        assert len(report["topDomains"]) == services.TOP_DOMAINS_LIMIT
        assert report["topDomains"][0]["domain"] == (
            f"site{services.TOP_DOMAINS_LIMIT + 2}.com"
        )
