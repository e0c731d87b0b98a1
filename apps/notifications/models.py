"""Notification recipients and the notification delivery log."""

from django.conf import settings
from django.db import models

from apps.core.models import TimeStampedModel


class NotificationRecipient(TimeStampedModel):
    """An address that receives new-request alerts for an organization."""

    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.CASCADE,
        related_name="notification_recipients",
    )
    email = models.EmailField()
    name = models.CharField(max_length=200, blank=True)
    is_active = models.BooleanField(default=True)
    added_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notification_recipients_added",
    )

    class Meta:
        ordering = ["email"]
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "email"],
                name="notification_recipient_org_email_unique",
            ),
        ]
        indexes = [
            models.Index(fields=["organization", "is_active"], name="recipient_org_active_idx"),
        ]

    def __str__(self):
        return f"{self.email} ({self.organization.slug})"

    def to_summary(self) -> dict:
        return {
            "id": self.pk,
            "email": self.email,
            "name": self.name,
            "organizationId": str(self.organization_id),
            "isActive": self.is_active,
        }


class Notification(models.Model):
    """Record of a decision notification sent to a request's submitter."""

    class NotificationType(models.TextChoices):
        APPROVED = "approved", "Approved"
        DENIED = "denied", "Denied"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    leave_request = models.ForeignKey(
        "leave.LeaveRequest",
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    notification_type = models.CharField(max_length=20, choices=NotificationType.choices)
    sent_at = models.DateTimeField(auto_now_add=True)
    email_sent = models.BooleanField(default=False)

    class Meta:
        ordering = ["-sent_at"]
        indexes = [
            models.Index(fields=["user"], name="notification_user_idx"),
            models.Index(fields=["leave_request", "notification_type"], name="notification_request_type_idx"),
        ]

    def __str__(self):
        return f"{self.notification_type} notice for request {self.leave_request_id}"
