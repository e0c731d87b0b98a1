"""Admin configuration for organizations app."""

from django.contrib import admin

from apps.notifications.models import NotificationRecipient

from .models import Organization


class NotificationRecipientInline(admin.TabularInline):
    """Inline admin for an organization's notification recipients."""

    model = NotificationRecipient
    extra = 0
    fields = ("email", "name", "is_active")


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    """Admin configuration for Organization model."""

    list_display = ("name", "slug", "admin_email", "google_sheet_id", "created_at")
    search_fields = ("name", "slug", "admin_email")
    readonly_fields = ("id", "created_at", "updated_at")
    inlines = [NotificationRecipientInline]
