"""Leave request models."""

import uuid

from django.conf import settings
from django.db import models

from apps.core.models import TimeStampedModel


class LeaveType(models.Model):
    """Kind of leave (vacation, sick day, day off, ...)."""

    name = models.CharField(max_length=100, unique=True)
    color = models.CharField(max_length=20, default="#2563eb")
    is_single_day = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class PayPeriod(models.Model):
    """Payroll period reference data."""

    period_number = models.PositiveIntegerField()
    start_date = models.DateField()
    end_date = models.DateField()
    t4_year = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["t4_year", "period_number"]
        unique_together = ["period_number", "t4_year"]
        indexes = [
            models.Index(fields=["start_date", "end_date"], name="pay_period_dates_idx"),
        ]

    def __str__(self):
        return f"PP{self.period_number} ({self.t4_year})"

    @property
    def label(self):
        return f"Pay Period {self.period_number}: {self.start_date} - {self.end_date}"


class LeaveRequest(TimeStampedModel):
    """
    A staff member's time-off request.

    Lifecycle: ``pending`` -> ``approved`` | ``denied``. Both outcomes are
    terminal. ``organization`` is stamped from the submitter's profile at
    creation and never changes.
    """

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        DENIED = "denied", "Denied"

    TERMINAL_STATUSES = (Status.APPROVED, Status.DENIED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="leave_requests",
    )
    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.CASCADE,
        related_name="leave_requests",
    )
    leave_type = models.ForeignKey(
        LeaveType,
        on_delete=models.PROTECT,
        related_name="requests",
    )
    pay_period = models.ForeignKey(
        PayPeriod,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="requests",
    )
    submission_date = models.DateField()
    start_date = models.DateField()
    end_date = models.DateField()
    reason = models.TextField()
    coverage_name = models.CharField(max_length=200, blank=True)
    coverage_email = models.EmailField(blank=True)

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="leave_reviews",
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    admin_notes = models.TextField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["organization", "status"], name="leave_request_org_status_idx"),
            models.Index(fields=["user"], name="leave_request_user_idx"),
            models.Index(fields=["start_date", "end_date"], name="leave_request_dates_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F("start_date")),
                name="leave_request_valid_date_range",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(status="pending")
                    | models.Q(reviewed_by__isnull=False, reviewed_at__isnull=False)
                ),
                name="leave_request_terminal_reviewed",
            ),
        ]

    def __str__(self):
        return f"{self.leave_type} for {self.user} ({self.status})"

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    @property
    def is_same_day(self):
        return self.start_date == self.end_date

    def save(self, *args, **kwargs):
        """Prevent moving a request to another organization."""
        if not self._state.adding:
            original_org_id = (
                LeaveRequest.objects.filter(pk=self.pk)
                .values_list("organization_id", flat=True)
                .first()
            )
            if original_org_id is not None and original_org_id != self.organization_id:
                raise ValueError("A leave request cannot change organization.")
        super().save(*args, **kwargs)

    def to_summary(self) -> dict:
        """Return the API representation of the request."""
        return {
            "id": str(self.pk),
            "userId": self.user_id,
            "organizationId": str(self.organization_id),
            "leaveTypeId": self.leave_type_id,
            "payPeriodId": self.pay_period_id,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "reason": self.reason,
            "status": self.status,
            "reviewedBy": self.reviewed_by_id,
            "reviewedAt": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "adminNotes": self.admin_notes,
        }
