from django.contrib import admin

from .models import GroupInvitation
from .models import ProjectGroup


@admin.register(ProjectGroup)
class ProjectGroupAdmin(admin.ModelAdmin):
    list_display = ["name", "leader", "supervisor", "session", "status", "member_count", "created"]
    list_filter = ["status", "session"]
    search_fields = ["name", "leader__email"]
    filter_horizontal = ["members"]
    ordering = ["-created"]

    @admin.display(description="Members")
    def member_count(self, obj):
        return obj.members.count()


@admin.register(GroupInvitation)
class GroupInvitationAdmin(admin.ModelAdmin):
    list_display = ["group", "invitee", "invited_by", "status", "created"]
    list_filter = ["status"]
    search_fields = ["group__name", "invitee__email", "invited_by__email"]
    ordering = ["-created"]
