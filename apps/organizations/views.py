"""Views for organizations app."""

import logging

from django.http import Http404, HttpResponseRedirect, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from apps.core.guards import CallerContext
from apps.core.http import error_response, parse_json_body
from apps.core.results import internal_error
from apps.leave.models import LeaveRequest

from .services import RegistrationService, SheetLinkService
from .tenancy import find_organization, resolve_organization_access, scope_to_caller

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class RegisterOrganizationAPIView(View):
    """
    POST /api/register-org/

    Creates an organization and its first admin account.
    """

    def post(self, request):
        try:
            data, failure = parse_json_body(request)
            if failure:
                return error_response(failure)

            result = RegistrationService().register(
                organization_name=data.get("organizationName"),
                admin_name=data.get("adminName"),
                admin_email=data.get("adminEmail"),
                password=data.get("password"),
            )
            if not result.ok:
                return error_response(result)

            return JsonResponse({
                "success": True,
                "organization": result.value.to_summary(),
            })
        except Exception:
            logger.exception("Error in register-org API")
            return error_response(internal_error())


class LinkSheetAPIView(View):
    """
    POST /api/admin/link-sheet/

    Links a spreadsheet to the caller's organization. Admin only.
    """

    def post(self, request):
        try:
            caller = CallerContext.from_request(request)
            data, failure = parse_json_body(request)
            if failure:
                return error_response(failure)

            result = SheetLinkService.link_sheet(
                caller,
                sheet_id=data.get("sheetId"),
                organization_id=data.get("organizationId"),
            )
            if not result.ok:
                return error_response(result)

            return JsonResponse({"success": True, "message": "Sheet linked successfully"})
        except Exception:
            logger.exception("Error in link-sheet API")
            return error_response(internal_error())


class OrganizationLookupAPIView(View):
    """
    GET /api/organizations/lookup/?q=<name or slug>

    Public lookup used by staff sign-up to find the organization to join.
    """

    def get(self, request):
        organization = find_organization(request.GET.get("q", ""))
        if organization is None:
            return JsonResponse({"error": "Organization not found"}, status=404)
        return JsonResponse({"organization": organization.to_summary()})


class OrganizationScopedView(View):
    """Base view for ``/org/<slug>/...`` pages; resolves tenant access first."""

    def dispatch(self, request, *args, **kwargs):
        self.caller = CallerContext.from_request(request)
        access = resolve_organization_access(self.caller.profile, kwargs["slug"])
        if access.not_found:
            raise Http404("Organization not found")
        if access.redirect_to:
            return HttpResponseRedirect(access.redirect_to)
        self.organization = access.organization
        return super().dispatch(request, *args, **kwargs)


class OrganizationDashboardView(OrganizationScopedView):
    """GET /org/<slug>/dashboard/ - overview of the caller's organization."""

    def get(self, request, slug):
        visible = scope_to_caller(LeaveRequest.objects.all(), self.caller)
        context = {
            "organization": self.organization.to_summary(),
            "role": self.caller.profile.role,
            "pendingCount": visible.filter(status=LeaveRequest.Status.PENDING).count(),
            "requestCount": visible.count(),
        }
        if self.caller.profile.is_admin:
            context["googleSheetId"] = self.organization.google_sheet_id
        return JsonResponse(context)


class OrganizationRequestsView(OrganizationScopedView):
    """GET /org/<slug>/requests/ - leave requests visible to the caller."""

    def get(self, request, slug):
        requests = scope_to_caller(
            LeaveRequest.objects.select_related("leave_type"),
            self.caller,
        )
        status = request.GET.get("status")
        if status:
            if status not in LeaveRequest.Status.values:
                return JsonResponse({"error": "Invalid status filter"}, status=400)
            requests = requests.filter(status=status)

        return JsonResponse({
            "organization": self.organization.to_summary(),
            "requests": [leave_request.to_summary() for leave_request in requests],
        })
