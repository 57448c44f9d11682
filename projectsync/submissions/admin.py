from django.contrib import admin

from .models import Submission


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ["title", "project", "milestone_type", "version", "status", "submitted_by", "created"]
    list_filter = ["milestone_type", "status"]
    search_fields = ["title", "project__title", "group__name"]
    raw_id_fields = ["project", "group", "submitted_by", "reviewed_by"]
    readonly_fields = ["version", "file_name", "file_size"]
