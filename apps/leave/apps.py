"""Leave app configuration."""

from django.apps import AppConfig


class LeaveConfig(AppConfig):
    """Configuration for the leave app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.leave"
    verbose_name = "Leave Requests"
