"""Leave request submission and the approve/deny state machine."""

import logging
import uuid

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.utils import timezone
from django.utils.dateparse import parse_date

from apps.core.guards import (
    ORG_MISMATCH_MESSAGE,
    CallerContext,
    check_admin_role,
    check_authentication,
    check_organization_ownership,
    run_guards,
    validate_required_field,
)
from apps.core.results import ErrorKind, Result, internal_error, not_found, validation_error
from apps.notifications.services import DecisionEvent, NewRequestEvent, get_dispatcher

from .models import LeaveRequest, LeaveType, PayPeriod

logger = logging.getLogger(__name__)

ALREADY_REVIEWED_MESSAGE = "Request has already been reviewed"


def already_reviewed() -> Result:
    return Result.failure(ErrorKind.CONFLICT_ALREADY_REVIEWED, 409, ALREADY_REVIEWED_MESSAGE)


def _get_or_none(model, pk):
    """Fetch a row by primary key, treating malformed keys as missing."""
    try:
        return model.objects.filter(pk=pk).first()
    except (ValueError, TypeError, ValidationError):
        return None


def _parse_date_field(value, field_name: str):
    """Parse an ISO date, returning (date, failure)."""
    if hasattr(value, "isoformat") and not isinstance(value, str):
        return value, None
    try:
        parsed = parse_date(str(value))
    except ValueError:
        parsed = None
    if parsed is None:
        return None, validation_error(f"{field_name} must be a valid date (YYYY-MM-DD)")
    return parsed, None


class LeaveRequestService:
    """
    Handles the leave request lifecycle.

    ``pending`` is the only state a request can leave. The write that moves
    it out of ``pending`` is conditional on the row still being pending, so
    two admins racing on the same request produce one success and one
    conflict. Notifications are sent after the write and never undo it.
    """

    def __init__(self, dispatcher=None):
        self._dispatcher = dispatcher

    @property
    def dispatcher(self):
        if self._dispatcher is None:
            self._dispatcher = get_dispatcher()
        return self._dispatcher

    def submit(
        self,
        caller: CallerContext,
        leave_type_id,
        start_date,
        end_date,
        reason,
        pay_period_id=None,
        coverage_name: str = "",
        coverage_email: str = "",
    ) -> Result:
        """Create a pending request in the caller's organization."""
        guard = run_guards(
            lambda: check_authentication(caller.user_id),
            lambda: validate_required_field(leave_type_id, "Leave type"),
            lambda: validate_required_field(start_date, "Start date"),
            lambda: validate_required_field(end_date, "End date"),
            lambda: validate_required_field(reason, "Reason"),
        )
        if not guard.ok:
            return guard

        if caller.organization_id is None:
            return Result.failure(ErrorKind.FORBIDDEN_ORG_MISMATCH, 403, ORG_MISMATCH_MESSAGE)

        start, failure = _parse_date_field(start_date, "Start date")
        if failure:
            return failure
        end, failure = _parse_date_field(end_date, "End date")
        if failure:
            return failure
        if end < start:
            return validation_error("End date cannot be before start date")

        leave_type = _get_or_none(LeaveType, leave_type_id)
        if leave_type is None:
            return validation_error("Leave type does not exist")
        if leave_type.is_single_day and start != end:
            return validation_error(f"{leave_type.name} requests must be a single day")

        pay_period = None
        if pay_period_id:
            pay_period = _get_or_none(PayPeriod, pay_period_id)
            if pay_period is None:
                return validation_error("Pay period does not exist")

        try:
            leave_request = LeaveRequest.objects.create(
                user_id=caller.user_id,
                organization_id=caller.organization_id,
                leave_type=leave_type,
                pay_period=pay_period,
                submission_date=timezone.localdate(),
                start_date=start,
                end_date=end,
                reason=reason,
                coverage_name=coverage_name or "",
                coverage_email=coverage_email or "",
            )
        except DatabaseError:
            logger.exception("Failed to create leave request for user %s", caller.user_id)
            return internal_error("Failed to submit request")

        logger.info(
            "Leave request %s submitted by user %s in organization %s",
            leave_request.pk,
            caller.user_id,
            caller.organization_id,
        )
        self._notify_new_request(leave_request)
        return Result.success(leave_request)

    def approve(self, caller: CallerContext, request_id) -> Result:
        return self.transition(caller, request_id, LeaveRequest.Status.APPROVED)

    def deny(self, caller: CallerContext, request_id, admin_notes: str | None = None) -> Result:
        return self.transition(caller, request_id, LeaveRequest.Status.DENIED, admin_notes)

    def transition(self, caller: CallerContext, request_id, target: str, admin_notes: str | None = None) -> Result:
        """Move a pending request to ``target`` and notify the submitter."""
        if target not in LeaveRequest.TERMINAL_STATUSES:
            raise ValueError(f"Unsupported transition target: {target}")

        guard = run_guards(
            lambda: check_authentication(caller.user_id),
            lambda: check_admin_role(caller.profile),
        )
        if not guard.ok:
            return guard

        leave_request = self._get_request(request_id)
        if leave_request is None:
            return not_found("Leave request not found")

        guard = check_organization_ownership(caller.organization_id, leave_request.organization_id)
        if not guard.ok:
            return guard

        if leave_request.status != LeaveRequest.Status.PENDING:
            return already_reviewed()

        now = timezone.now()
        changes = {
            "status": target,
            "reviewed_by_id": caller.user_id,
            "reviewed_at": now,
            "updated_at": now,
        }
        if target == LeaveRequest.Status.DENIED:
            changes["admin_notes"] = admin_notes or None

        try:
            updated = LeaveRequest.objects.filter(
                pk=leave_request.pk,
                status=LeaveRequest.Status.PENDING,
            ).update(**changes)
        except DatabaseError:
            logger.exception("Failed to persist %s for leave request %s", target, leave_request.pk)
            return internal_error("Failed to update request")

        if not updated:
            logger.info("Leave request %s was reviewed concurrently", leave_request.pk)
            return already_reviewed()

        leave_request.refresh_from_db()
        logger.info(
            "Leave request %s %s by user %s",
            leave_request.pk,
            target,
            caller.user_id,
        )
        self._notify_decision(leave_request)
        return Result.success(leave_request)

    def _get_request(self, request_id):
        try:
            request_id = uuid.UUID(str(request_id))
        except ValueError:
            return None
        return (
            LeaveRequest.objects.select_related("user", "user__profile", "leave_type")
            .filter(pk=request_id)
            .first()
        )

    def _notify_decision(self, leave_request) -> None:
        """Best-effort: the transition stays committed if delivery fails."""
        try:
            self.dispatcher.dispatch_decision(DecisionEvent.from_leave_request(leave_request))
        except Exception:
            logger.exception("Error dispatching %s notice for request %s", leave_request.status, leave_request.pk)

    def _notify_new_request(self, leave_request) -> None:
        try:
            self.dispatcher.dispatch_new_request(NewRequestEvent.from_leave_request(leave_request))
        except Exception:
            logger.exception("Error dispatching new request alert for request %s", leave_request.pk)
