from django.contrib import admin

from .models import AcademicSession
from .models import DocumentTemplate
from .models import SessionDeadline


class SessionDeadlineInline(admin.TabularInline):
    model = SessionDeadline
    extra = 0


@admin.register(AcademicSession)
class AcademicSessionAdmin(admin.ModelAdmin):
    list_display = ["name", "start_date", "end_date", "is_active"]
    list_filter = ["is_active"]
    inlines = [SessionDeadlineInline]


@admin.register(DocumentTemplate)
class DocumentTemplateAdmin(admin.ModelAdmin):
    list_display = ["name", "category", "uploaded_by", "created"]
    list_filter = ["category"]
    search_fields = ["name"]
