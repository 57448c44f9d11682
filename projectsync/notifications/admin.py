from django.contrib import admin

from .models import Announcement
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["title", "user", "notification_type", "is_read", "created"]
    list_filter = ["notification_type", "is_read"]
    search_fields = ["title", "user__email"]
    ordering = ["-created"]


@admin.register(Announcement)
class AnnouncementAdmin(admin.ModelAdmin):
    list_display = ["title", "author", "author_role", "priority", "published_at", "expires_at"]
    list_filter = ["priority", "author_role"]
    search_fields = ["title", "content"]
    filter_horizontal = ["target_roles", "target_groups"]
    exclude = ["read_by"]
