from django.contrib import admin

from apps.workflow.models import AppError


@admin.register(AppError)
class AppErrorAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "app", "function", "severity", "message", "resolved")
    list_filter = ("app", "severity", "resolved")
    search_fields = ("message", "file", "function")
    readonly_fields = (
        "id",
        "timestamp",
        "message",
        "data",
        "app",
        "file",
        "function",
        "severity",
        "client_id",
        "contact_id",
    )
