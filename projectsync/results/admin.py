from django.contrib import admin

from .models import ProjectResult
from .models import ResultPublication


@admin.register(ProjectResult)
class ProjectResultAdmin(admin.ModelAdmin):
    list_display = ["project", "session", "supervisor_score", "external_score", "milestone_score", "total", "grade"]
    list_filter = ["session", "grade"]
    search_fields = ["project__title"]
    readonly_fields = ["compiled_at"]


@admin.register(ResultPublication)
class ResultPublicationAdmin(admin.ModelAdmin):
    list_display = ["session", "is_published", "published_at", "published_by"]
    readonly_fields = ["published_at", "published_by"]
