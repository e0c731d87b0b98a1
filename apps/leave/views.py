"""JSON endpoints for submitting and reviewing leave requests."""

import logging

from django.http import JsonResponse
from django.views import View

from apps.core.guards import CallerContext
from apps.core.http import error_response, parse_json_body
from apps.core.results import internal_error

from .services import LeaveRequestService

logger = logging.getLogger(__name__)


class SubmitLeaveRequestAPIView(View):
    """POST /api/leave-requests/ - staff submission."""

    def post(self, request):
        try:
            caller = CallerContext.from_request(request)
            data, failure = parse_json_body(request)
            if failure:
                return error_response(failure)

            result = LeaveRequestService().submit(
                caller,
                leave_type_id=data.get("leaveTypeId"),
                start_date=data.get("startDate"),
                end_date=data.get("endDate"),
                reason=data.get("reason"),
                pay_period_id=data.get("payPeriodId"),
                coverage_name=data.get("coverageName", ""),
                coverage_email=data.get("coverageEmail", ""),
            )
            if not result.ok:
                return error_response(result)

            return JsonResponse(
                {"success": True, "request": result.value.to_summary()},
                status=201,
            )
        except Exception:
            logger.exception("Error in leave request submit API")
            return error_response(internal_error())


class ReviewLeaveRequestAPIView(View):
    """Base for the approve/deny endpoints."""

    action = None

    def post(self, request, request_id):
        try:
            caller = CallerContext.from_request(request)
            data, failure = parse_json_body(request)
            if failure:
                return error_response(failure)

            result = self.review(LeaveRequestService(), caller, request_id, data)
            if not result.ok:
                return error_response(result)

            return JsonResponse({"success": True, "request": result.value.to_summary()})
        except Exception:
            logger.exception("Error in leave request %s API", self.action)
            return error_response(internal_error())

    def review(self, service, caller, request_id, data):
        raise NotImplementedError


class ApproveLeaveRequestAPIView(ReviewLeaveRequestAPIView):
    """POST /api/leave-requests/<id>/approve/"""

    action = "approve"

    def review(self, service, caller, request_id, data):
        return service.approve(caller, request_id)


class DenyLeaveRequestAPIView(ReviewLeaveRequestAPIView):
    """POST /api/leave-requests/<id>/deny/ with optional ``adminNotes``."""

    action = "deny"

    def review(self, service, caller, request_id, data):
        admin_notes = data.get("adminNotes")
        if admin_notes is not None and not isinstance(admin_notes, str):
            admin_notes = str(admin_notes)
        return service.deny(caller, request_id, admin_notes=admin_notes)
