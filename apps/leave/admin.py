"""Admin configuration for leave app."""

from django.contrib import admin

from .models import LeaveRequest, LeaveType, PayPeriod


@admin.register(LeaveType)
class LeaveTypeAdmin(admin.ModelAdmin):
    """Admin configuration for LeaveType model."""

    list_display = ("name", "color", "is_single_day")


@admin.register(PayPeriod)
class PayPeriodAdmin(admin.ModelAdmin):
    """Admin configuration for PayPeriod model."""

    list_display = ("period_number", "t4_year", "start_date", "end_date")
    list_filter = ("t4_year",)


@admin.register(LeaveRequest)
class LeaveRequestAdmin(admin.ModelAdmin):
    """
    Admin configuration for LeaveRequest model.

    Review fields are read-only; decisions go through the approve/deny API so
    that the pending check and the submitter notification always apply.
    """

    list_display = ("user", "organization", "leave_type", "start_date", "end_date", "status", "reviewed_at")
    list_filter = ("status", "leave_type", "organization")
    search_fields = ("user__email", "reason", "organization__slug")
    raw_id_fields = ("user", "organization", "pay_period")
    readonly_fields = ("status", "reviewed_by", "reviewed_at", "admin_notes", "created_at", "updated_at")
    date_hierarchy = "start_date"
