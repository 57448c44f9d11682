from django.contrib import admin

from .models import Evaluation


@admin.register(Evaluation)
class EvaluationAdmin(admin.ModelAdmin):
    list_display = ["project", "evaluator", "evaluator_role", "total_marks", "status", "submitted_at"]
    list_filter = ["evaluator_role", "status"]
    search_fields = ["project__title", "evaluator__email"]
    raw_id_fields = ["project", "group", "evaluator"]
    readonly_fields = ["total_marks", "max_marks", "submitted_at", "locked_at"]
