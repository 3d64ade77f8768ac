from collections import defaultdict
from datetime import date

from django.db import transaction
from django.db.models import F

from collab_relay.tracking.models import SiteClassification
from collab_relay.tracking.models import TimeLog

PRODUCTIVE = SiteClassification.Kind.PRODUCTIVE
UNPRODUCTIVE = SiteClassification.Kind.UNPRODUCTIVE
NEUTRAL = "neutral"

TOP_DOMAINS_LIMIT = 10


class ClassificationConflictError(ValueError):
    """A domain was listed as both productive and unproductive."""

    def __init__(self, domains: list[str]):
        self.domains = domains
        super().__init__(
            "Domains cannot be both productive and unproductive: " + ", ".join(domains)
        )


def record_time(user_id: str, domain: str, day: date, duration_ms: int) -> TimeLog:
    """Add ``duration_ms`` to the user's log for ``domain`` on ``day``.

    Creates the row on first report; later reports increment it atomically.
    """
    with transaction.atomic():
        log, created = TimeLog.objects.select_for_update().get_or_create(
            user_id=user_id,
            domain=domain,
            date=day,
            defaults={"duration_ms": duration_ms},
        )
        if not created:
            TimeLog.objects.filter(pk=log.pk).update(
                duration_ms=F("duration_ms") + duration_ms
            )
            log.refresh_from_db(fields=["duration_ms", "updated_at"])
    return log


def get_classification_map(user_id: str) -> dict[str, str]:
    return dict(
        SiteClassification.objects.filter(user_id=user_id).values_list(
            "domain", "kind"
        )
    )


def get_classifications(user_id: str) -> dict[str, list[str]]:
    productive: list[str] = []
    unproductive: list[str] = []
    for domain, kind in sorted(get_classification_map(user_id).items()):
        if kind == PRODUCTIVE:
            productive.append(domain)
        else:
            unproductive.append(domain)
    return {"productive": productive, "unproductive": unproductive}


def replace_classifications(
    user_id: str,
    productive: list[str],
    unproductive: list[str],
) -> dict[str, list[str]]:
    """Replace the user's site lists wholesale, as the options page saves them."""

    productive_set = set(productive)
    unproductive_set = set(unproductive)
    overlap = sorted(productive_set & unproductive_set)
    if overlap:
        raise ClassificationConflictError(overlap)

    with transaction.atomic():
        SiteClassification.objects.filter(user_id=user_id).delete()
        SiteClassification.objects.bulk_create(
            [
                SiteClassification(user_id=user_id, domain=domain, kind=PRODUCTIVE)
                for domain in sorted(productive_set)
            ]
            + [
                SiteClassification(user_id=user_id, domain=domain, kind=UNPRODUCTIVE)
                for domain in sorted(unproductive_set)
            ]
        )
    return get_classifications(user_id)


def _empty_bucket() -> dict[str, int]:
    return {"totalTime": 0, "productiveTime": 0, "unproductiveTime": 0}


def build_analytics(user_id: str) -> dict:
    """Aggregate a user's time logs into the dashboard report.

    A domain counts as productive/unproductive only on an exact match with
    one of the user's classifications; everything else is neutral.
    """
    categories = get_classification_map(user_id)

    totals = _empty_bucket()
    by_date: dict[date, dict[str, int]] = defaultdict(_empty_bucket)
    by_domain: dict[str, int] = defaultdict(int)

    rows = TimeLog.objects.filter(user_id=user_id).values_list(
        "domain", "date", "duration_ms"
    )
    for domain, day, duration in rows:
        category = categories.get(domain, NEUTRAL)
        for bucket in (totals, by_date[day]):
            bucket["totalTime"] += duration
            if category == PRODUCTIVE:
                bucket["productiveTime"] += duration
            elif category == UNPRODUCTIVE:
                bucket["unproductiveTime"] += duration
        by_domain[domain] += duration

    top_domains = sorted(by_domain.items(), key=lambda item: (-item[1], item[0]))
    return {
        "userId": user_id,
        **totals,
        "neutralTime": (
            totals["totalTime"] - totals["productiveTime"] - totals["unproductiveTime"]
        ),
        "byDate": [
            {"date": day.isoformat(), **bucket}
            for day, bucket in sorted(by_date.items())
        ],
        "topDomains": [
            {
                "domain": domain,
                "durationMs": duration,
                "category": str(categories.get(domain, NEUTRAL)),
            }
            for domain, duration in top_domains[:TOP_DOMAINS_LIMIT]
        ],
    }
