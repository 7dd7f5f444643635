from django.contrib import admin
from django.utils.html import format_html

from .models import DatasetUpload, Snapshot


class DatasetUploadInline(admin.TabularInline):
    model = DatasetUpload
    extra = 0
    fields = ["kind", "source_filename", "status", "rows_stored", "rows_corrected"]
    readonly_fields = fields
    can_delete = False
    show_change_link = True


@admin.register(Snapshot)
class SnapshotAdmin(admin.ModelAdmin):
    """Admin interface for snapshots."""

    list_display = ["date", "description", "is_current", "upload_count", "created_at"]
    list_filter = ["is_current"]
    search_fields = ["description"]
    readonly_fields = ["created_at", "updated_at"]
    date_hierarchy = "date"
    inlines = [DatasetUploadInline]
    actions = ["make_current"]

    def upload_count(self, obj):
        return obj.uploads.count()

    upload_count.short_description = "Datasets"

    @admin.action(description="Mark selected snapshot as current")
    def make_current(self, request, queryset):
        snapshot = queryset.order_by("-date").first()
        if snapshot:
            snapshot.set_current()
            self.message_user(request, f"{snapshot} is now current")


@admin.register(DatasetUpload)
class DatasetUploadAdmin(admin.ModelAdmin):
    """Admin interface for stored datasets."""

    list_display = [
        "id",
        "snapshot",
        "kind",
        "source_filename",
        "status_badge",
        "rows_stored",
        "rows_skipped",
        "rows_corrected",
        "uploaded_at",
    ]
    list_filter = ["kind", "status", "snapshot"]
    search_fields = ["source_filename", "error_message"]
    readonly_fields = [
        "uploaded_at",
        "started_at",
        "completed_at",
        "duration_display",
        "error_message",
    ]

    fieldsets = (
        (
            "Identity",
            {"fields": ("snapshot", "kind", "source_filename", "uploaded_at")},
        ),
        (
            "Processing State",
            {"fields": ("status", "started_at", "completed_at", "duration_display")},
        ),
        (
            "Statistics",
            {"fields": ("total_rows", "rows_stored", "rows_skipped", "rows_corrected")},
        ),
        (
            "Errors",
            {"fields": ("error_message",), "classes": ("collapse",)},
        ),
    )

    def status_badge(self, obj):
        colors = {
            "PENDING": "#f59e0b",  # amber
            "PROCESSING": "#8b5cf6",  # purple
            "COMPLETED": "#10b981",  # green
            "FAILED": "#ef4444",  # red
        }
        color = colors.get(obj.status, "#6b7280")
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px; font-weight: bold; font-size: 11px;">{}</span>',
            color,
            obj.get_status_display(),
        )

    status_badge.short_description = "Status"

    def duration_display(self, obj):
        duration = obj.duration
        if duration is None:
            return "-"
        return f"{duration.total_seconds():.1f}s"

    duration_display.short_description = "Duration"
