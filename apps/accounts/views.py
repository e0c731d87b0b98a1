"""Views for accounts app."""

import logging

from django.contrib.auth.views import LoginView, LogoutView
from django.http import HttpResponseRedirect, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from apps.core.http import error_response, parse_json_body
from apps.core.results import internal_error
from apps.organizations.tenancy import post_login_destination

from .services import StaffRegistrationService

logger = logging.getLogger(__name__)

LOGIN_ERRORS = {
    "auth": "Please sign in to continue.",
    "no_profile": "Your account has no profile. Contact your administrator.",
    "no_org": "Your account is not assigned to an organization.",
    "org_not_found": "Your organization could not be found.",
}


@method_decorator(csrf_exempt, name="dispatch")
class StaffRegisterAPIView(View):
    """POST /api/register/ - staff sign-up into an existing organization."""

    def post(self, request):
        try:
            data, failure = parse_json_body(request)
            if failure:
                return error_response(failure)

            result = StaffRegistrationService().register(
                full_name=data.get("fullName"),
                email=data.get("email"),
                password=data.get("password"),
                organization_id=data.get("organizationId"),
            )
            if not result.ok:
                return error_response(result)

            user = result.value
            return JsonResponse({
                "success": True,
                "user": {
                    "id": user.pk,
                    "email": user.email,
                    "organizationId": str(user.profile.organization_id),
                },
            })
        except Exception:
            logger.exception("Error in staff register API")
            return error_response(internal_error())


class AuthCallbackView(View):
    """GET /auth/callback/ - send a signed-in user to their organization."""

    def get(self, request):
        return HttpResponseRedirect(post_login_destination(request.user))


class SignInView(LoginView):
    """Email/password sign-in; success continues to the auth callback."""

    template_name = "accounts/login.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["login_error"] = LOGIN_ERRORS.get(self.request.GET.get("error", ""))
        return context

    def form_valid(self, form):
        response = super().form_valid(form)
        logger.info("User %s signed in", self.request.user.pk)
        return response


class SignOutView(LogoutView):
    """Sign-out (POST only)."""

    def post(self, request, *args, **kwargs):
        if request.user.is_authenticated:
            logger.info("User %s signed out", request.user.pk)
        return super().post(request, *args, **kwargs)
