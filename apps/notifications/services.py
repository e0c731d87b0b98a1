"""
Notification dispatch for leave request events.

The core only depends on the ``NotificationDispatcher`` contract. The
configured implementation is loaded from
``settings.STAFFHUB_NOTIFICATION_DISPATCHER``; the default delivers email
through Django's mail framework and records each decision notice.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from django.conf import settings
from django.core.mail import send_mail
from django.db import DatabaseError
from django.utils.module_loading import import_string

from apps.core.guards import (
    CallerContext,
    check_admin_role,
    check_authentication,
    check_organization_ownership,
    require_org_admin,
    run_guards,
    validate_required_field,
)
from apps.core.results import Result, not_found, validation_error
from apps.notifications.models import Notification, NotificationRecipient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecisionEvent:
    """An approve/deny outcome to deliver to the request's submitter."""

    request_id: str
    user_id: int
    user_email: str
    user_name: str
    organization_id: str
    leave_type: str
    start_date: date
    end_date: date
    outcome: str
    admin_notes: Optional[str] = None

    @classmethod
    def from_leave_request(cls, leave_request) -> "DecisionEvent":
        profile = getattr(leave_request.user, "profile", None)
        return cls(
            request_id=str(leave_request.pk),
            user_id=leave_request.user_id,
            user_email=leave_request.user.email,
            user_name=profile.full_name if profile else leave_request.user.email,
            organization_id=str(leave_request.organization_id),
            leave_type=leave_request.leave_type.name,
            start_date=leave_request.start_date,
            end_date=leave_request.end_date,
            outcome=leave_request.status,
            admin_notes=leave_request.admin_notes,
        )

    @property
    def is_approval(self) -> bool:
        return self.outcome == Notification.NotificationType.APPROVED


@dataclass(frozen=True)
class NewRequestEvent:
    """A freshly submitted request to announce to organization admins."""

    request_id: str
    organization_id: str
    employee_name: str
    employee_email: str
    leave_type: str
    start_date: date
    end_date: date
    reason: str
    submission_date: date
    pay_period_label: str = ""
    coverage_name: str = ""
    coverage_email: str = ""

    @classmethod
    def from_leave_request(cls, leave_request) -> "NewRequestEvent":
        profile = getattr(leave_request.user, "profile", None)
        pay_period = leave_request.pay_period
        return cls(
            request_id=str(leave_request.pk),
            organization_id=str(leave_request.organization_id),
            employee_name=profile.full_name if profile else leave_request.user.email,
            employee_email=leave_request.user.email,
            leave_type=leave_request.leave_type.name,
            start_date=leave_request.start_date,
            end_date=leave_request.end_date,
            reason=leave_request.reason,
            submission_date=leave_request.submission_date,
            pay_period_label=pay_period.label if pay_period else "",
            coverage_name=leave_request.coverage_name,
            coverage_email=leave_request.coverage_email,
        )


class NotificationDispatcher:
    """Contract for delivering leave request events."""

    def dispatch_decision(self, event: DecisionEvent) -> bool:
        """Deliver an approve/deny outcome. Returns True if delivered."""
        raise NotImplementedError

    def dispatch_new_request(self, event: NewRequestEvent) -> bool:
        """Alert organization admins about a new request. Returns True if delivered."""
        raise NotImplementedError


def get_dispatcher() -> NotificationDispatcher:
    """Instantiate the configured notification dispatcher."""
    dispatcher_class = import_string(settings.STAFFHUB_NOTIFICATION_DISPATCHER)
    return dispatcher_class()


def parse_email_list(value: str | None) -> list[str]:
    """Split a comma-separated address list, trimming blanks."""
    if not value:
        return []
    return [email.strip() for email in value.split(",") if email.strip()]


def normalize_recipient_email(email: str) -> str:
    """Canonical form stored for recipient addresses."""
    return email.strip().lower()


def get_notification_recipients(organization_id) -> list[str]:
    """
    Return active recipient addresses for an organization.

    Falls back to ``STAFFHUB_NOTIFY_EMAILS`` when the organization has no
    active recipients or the lookup fails.
    """
    fallback = parse_email_list(getattr(settings, "STAFFHUB_NOTIFY_EMAILS", ""))
    try:
        emails = list(
            NotificationRecipient.objects.filter(
                organization_id=organization_id,
                is_active=True,
            ).values_list("email", flat=True)
        )
    except DatabaseError:
        logger.exception("Error fetching notification recipients for %s", organization_id)
        return fallback
    return emails or fallback


def format_date(value: date) -> str:
    return f"{value:%B} {value.day}, {value.year}"


def format_date_range(start_date: date, end_date: date) -> str:
    """Format a request's dates, e.g. 'January 15 - January 20, 2025'."""
    if start_date == end_date:
        return format_date(start_date)
    if start_date.year == end_date.year:
        return f"{start_date:%B} {start_date.day} - {end_date:%B} {end_date.day}, {end_date.year}"
    return f"{format_date(start_date)} - {format_date(end_date)}"


class EmailNotificationDispatcher(NotificationDispatcher):
    """Deliver notifications as plain-text email."""

    def _app_url(self, path: str) -> str:
        return f"{settings.STAFFHUB_APP_URL.rstrip('/')}{path}"

    def build_decision_message(self, event: DecisionEvent) -> tuple[str, str]:
        """Return the (subject, body) for a decision email."""
        dates = format_date_range(event.start_date, event.end_date)
        if event.is_approval:
            subject = f"Time-Off Request Approved - {event.leave_type}"
            lines = [
                f"Hi {event.user_name},",
                "",
                f"Your {event.leave_type} request for {dates} has been approved.",
            ]
        else:
            subject = f"Time-Off Request Denied - {event.leave_type}"
            lines = [
                f"Hi {event.user_name},",
                "",
                f"Your {event.leave_type} request for {dates} has been denied.",
            ]
            if event.admin_notes:
                lines += ["", f"Notes from your administrator: {event.admin_notes}"]
        lines += ["", f"View your requests: {self._app_url('/dashboard')}"]
        return subject, "\n".join(lines)

    def build_new_request_message(self, event: NewRequestEvent) -> tuple[str, str]:
        """Return the (subject, body) for a new-request alert."""
        subject = f"New Time-Off Request from {event.employee_name}"
        lines = [
            f"{event.employee_name} <{event.employee_email}> submitted a {event.leave_type} request.",
            "",
            f"Dates: {format_date_range(event.start_date, event.end_date)}",
            f"Submitted: {format_date(event.submission_date)}",
        ]
        if event.pay_period_label:
            lines.append(f"Pay period: {event.pay_period_label}")
        lines.append(f"Reason: {event.reason}")
        if event.coverage_name:
            coverage = event.coverage_name
            if event.coverage_email:
                coverage += f" <{event.coverage_email}>"
            lines.append(f"Coverage: {coverage}")
        lines += ["", f"Review it: {self._app_url('/admin')}"]
        return subject, "\n".join(lines)

    def dispatch_decision(self, event: DecisionEvent) -> bool:
        notification = Notification.objects.create(
            user_id=event.user_id,
            leave_request_id=event.request_id,
            notification_type=event.outcome,
        )

        subject, body = self.build_decision_message(event)
        try:
            sent = send_mail(
                subject=subject,
                message=body,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[event.user_email],
                fail_silently=False,
            )
        except Exception:
            logger.exception("Failed to send %s email for request %s", event.outcome, event.request_id)
            return False

        if sent:
            notification.email_sent = True
            notification.save(update_fields=["email_sent"])
            logger.info("Sent %s notice for request %s", event.outcome, event.request_id)
        return bool(sent)

    def dispatch_new_request(self, event: NewRequestEvent) -> bool:
        recipients = get_notification_recipients(event.organization_id)
        if not recipients:
            logger.info(
                "No notification recipients configured for organization %s, skipping admin notification",
                event.organization_id,
            )
            return False

        subject, body = self.build_new_request_message(event)
        try:
            sent = send_mail(
                subject=subject,
                message=body,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=recipients,
                fail_silently=False,
            )
        except Exception:
            logger.exception("Failed to send new request alert for request %s", event.request_id)
            return False

        logger.info("Admin notification sent for request %s", event.request_id)
        return bool(sent)


class RecipientService:
    """Admin management of an organization's notification recipients."""

    @classmethod
    def add_recipient(cls, caller: CallerContext, organization_id, email, name: str = "") -> Result:
        """Add a recipient, or reactivate it if the address is already listed."""
        guard = run_guards(
            lambda: require_org_admin(caller, organization_id),
            lambda: validate_required_field(email, "Email"),
        )
        if not guard.ok:
            return guard
        if not isinstance(email, str) or "@" not in email:
            return validation_error("Email must be a valid email address")

        recipient, created = NotificationRecipient.objects.get_or_create(
            organization_id=caller.organization_id,
            email=normalize_recipient_email(email),
            defaults={"name": name or "", "added_by_id": caller.user_id},
        )
        if not created:
            recipient.is_active = True
            if name:
                recipient.name = name
            recipient.save(update_fields=["is_active", "name", "updated_at"])

        logger.info(
            "%s notification recipient %s for organization %s",
            "Added" if created else "Reactivated",
            recipient.email,
            recipient.organization_id,
        )
        return Result.success(recipient)

    @classmethod
    def deactivate_recipient(cls, caller: CallerContext, recipient_id) -> Result:
        """Stop sending alerts to a recipient of the caller's organization."""
        guard = run_guards(
            lambda: check_authentication(caller.user_id),
            lambda: check_admin_role(caller.profile),
        )
        if not guard.ok:
            return guard

        recipient = NotificationRecipient.objects.filter(pk=recipient_id).first()
        if recipient is None:
            return not_found("Notification recipient not found")

        guard = check_organization_ownership(caller.organization_id, recipient.organization_id)
        if not guard.ok:
            return guard

        recipient.is_active = False
        recipient.save(update_fields=["is_active", "updated_at"])
        logger.info("Deactivated notification recipient %s", recipient.pk)
        return Result.success(recipient)
