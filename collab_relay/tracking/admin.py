from django.contrib import admin

from collab_relay.tracking import models


@admin.register(models.TimeLog)
class TimeLogAdmin(admin.ModelAdmin):
    list_display = ["id", "user_id", "domain", "date", "duration_ms"]
    search_fields = ["user_id", "domain"]
    list_filter = ["date"]


@admin.register(models.SiteClassification)
class SiteClassificationAdmin(admin.ModelAdmin):
    list_display = ["id", "user_id", "domain", "kind"]
    search_fields = ["user_id", "domain"]
    list_filter = ["kind"]
