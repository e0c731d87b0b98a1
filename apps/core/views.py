"""Core views."""

import logging

from django.http import HttpResponseRedirect, JsonResponse
from django.views import View

from apps.organizations.tenancy import post_login_destination

from .http import error_response
from .results import ErrorKind, Result, unauthorized

logger = logging.getLogger(__name__)

CSRF_FAILED_MESSAGE = "Forbidden - CSRF verification failed"


class HomeView(View):
    """Public landing endpoint."""

    def get(self, request):
        context = {"app": "StaffHub", "authenticated": request.user.is_authenticated}
        if request.user.is_authenticated:
            context["next"] = post_login_destination(request.user)
        return JsonResponse(context)


class LegacyRedirectView(View):
    """Send legacy ``/dashboard``, ``/admin`` and ``/calendar`` links to the org-scoped area."""

    def get(self, request, *args, **kwargs):
        return HttpResponseRedirect(post_login_destination(request.user))


def csrf_failure(request, reason=""):
    """
    CSRF_FAILURE_VIEW rendering rejections as JSON errors.

    Anonymous callers get the same 401 the guard chain would have given
    them; signed-in callers get a 403.
    """
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return error_response(unauthorized())

    logger.warning("CSRF verification failed for %s on %s: %s", user.pk, request.path, reason)
    return error_response(Result.failure(ErrorKind.FORBIDDEN_CSRF, 403, CSRF_FAILED_MESSAGE))
