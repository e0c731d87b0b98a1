"""Views for managing notification recipients."""

import logging

from django.http import JsonResponse
from django.views import View

from apps.core.guards import CallerContext
from apps.core.http import error_response, parse_json_body
from apps.core.results import internal_error

from .services import RecipientService

logger = logging.getLogger(__name__)


class AddRecipientAPIView(View):
    """POST /api/admin/notification-recipients/"""

    def post(self, request):
        try:
            caller = CallerContext.from_request(request)
            data, failure = parse_json_body(request)
            if failure:
                return error_response(failure)

            result = RecipientService.add_recipient(
                caller,
                organization_id=data.get("organizationId"),
                email=data.get("email"),
                name=data.get("name") or "",
            )
            if not result.ok:
                return error_response(result)

            return JsonResponse({"success": True, "recipient": result.value.to_summary()})
        except Exception:
            logger.exception("Error adding notification recipient")
            return error_response(internal_error())


class DeactivateRecipientAPIView(View):
    """POST /api/admin/notification-recipients/<id>/deactivate/"""

    def post(self, request, pk):
        try:
            caller = CallerContext.from_request(request)
            result = RecipientService.deactivate_recipient(caller, pk)
            if not result.ok:
                return error_response(result)

            return JsonResponse({"success": True, "recipient": result.value.to_summary()})
        except Exception:
            logger.exception("Error deactivating notification recipient %s", pk)
            return error_response(internal_error())
