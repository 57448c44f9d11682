from django.contrib import admin

from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ["action", "user_email", "user_role", "ip_address", "created"]
    list_filter = ["action", "user_role"]
    search_fields = ["user_email"]
    ordering = ["-created"]
    readonly_fields = ["user", "user_email", "user_role", "action", "details", "ip_address"]
