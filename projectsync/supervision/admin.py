from django.contrib import admin

from .models import SupervisionRequest


@admin.register(SupervisionRequest)
class SupervisionRequestAdmin(admin.ModelAdmin):
    list_display = ["group", "supervisor", "requested_by", "status", "created", "responded_at"]
    list_filter = ["status"]
    search_fields = ["group__name", "supervisor__email"]
    raw_id_fields = ["group", "supervisor", "requested_by"]
    ordering = ["-created"]
