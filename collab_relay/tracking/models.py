from django.db import models
from django.utils.translation import gettext_lazy as _


class TimeLog(models.Model):
    """Time spent on one domain on one day, accumulated per user.

    The browser extension reports deltas; rows are upserted and the
    duration incremented (see ``services.record_time``).
    """

    user_id = models.CharField(max_length=255, db_index=True)
    domain = models.CharField(max_length=255)
    date = models.DateField()
    duration_ms = models.BigIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "domain"]
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "domain", "date"],
                name="uniq_timelog_user_domain_date",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple repr
        return f"TimeLog({self.user_id}:{self.domain}@{self.date}={self.duration_ms}ms)"


class SiteClassification(models.Model):
    class Kind(models.TextChoices):
        PRODUCTIVE = "productive", _("Productive")
        UNPRODUCTIVE = "unproductive", _("Unproductive")

    user_id = models.CharField(max_length=255, db_index=True)
    domain = models.CharField(max_length=255)
    kind = models.CharField(max_length=16, choices=Kind.choices)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["kind", "domain"]
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "domain"],
                name="uniq_classification_user_domain",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple repr
        return f"{self.domain} ({self.kind}) - {self.user_id}"
