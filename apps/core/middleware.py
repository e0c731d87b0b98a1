"""Page-level route protection."""

import logging

from django.conf import settings
from django.http import HttpResponseRedirect
from django.utils.deprecation import MiddlewareMixin

from .routing import decide

logger = logging.getLogger(__name__)


def identity_service_configured() -> bool:
    """Check whether the identity service base URL is set."""
    return bool(getattr(settings, "IDENTITY_SERVICE_URL", "").strip())


class RouteProtectionMiddleware(MiddlewareMixin):
    """
    Redirect callers based on route class and authentication state.

    Anonymous callers are sent to the login page from protected routes and
    signed-in callers are sent home from auth pages. When the identity
    service is not configured the check is skipped and logged.
    """

    def process_request(self, request):
        check_skipped = not identity_service_configured()
        user = getattr(request, "user", None)
        is_authenticated = bool(user and user.is_authenticated)

        decision = decide(request.path, is_authenticated, check_skipped=check_skipped)

        if decision.skipped:
            logger.warning(
                "Identity service URL is not configured; "
                "skipping route protection for %s",
                request.path,
            )
            return None

        if decision.is_redirect:
            logger.debug("Redirecting %s to %s", request.path, decision.redirect_to)
            return HttpResponseRedirect(decision.redirect_to)

        return None
