"""Admin configuration for notifications app."""

from django.contrib import admin

from .models import Notification, NotificationRecipient


@admin.register(NotificationRecipient)
class NotificationRecipientAdmin(admin.ModelAdmin):
    """Admin for NotificationRecipient model."""

    list_display = ["email", "name", "organization", "is_active", "created_at"]
    list_filter = ["is_active", "organization"]
    search_fields = ["email", "name", "organization__slug"]
    raw_id_fields = ["organization", "added_by"]


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Admin for the decision notification log."""

    list_display = ["leave_request", "user", "notification_type", "email_sent", "sent_at"]
    list_filter = ["notification_type", "email_sent", "sent_at"]
    search_fields = ["user__email"]
    raw_id_fields = ["user", "leave_request"]
    readonly_fields = ["sent_at"]
    date_hierarchy = "sent_at"
