from django.contrib import admin

from .models import Milestone
from .models import Project


class MilestoneInline(admin.TabularInline):
    model = Milestone
    extra = 0
    readonly_fields = ["status"]


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ["title", "group", "supervisor", "status", "submitted_at", "approved_at"]
    list_filter = ["status", "group__session"]
    search_fields = ["title", "group__name"]
    raw_id_fields = ["group", "supervisor", "reviewed_by"]
    inlines = [MilestoneInline]


@admin.register(Milestone)
class MilestoneAdmin(admin.ModelAdmin):
    list_display = ["title", "project", "milestone_type", "due_date", "status"]
    list_filter = ["milestone_type", "status"]
    search_fields = ["title", "project__title"]
