"""Tests for organization-scoped access helpers."""

import pytest

from apps.accounts.models import Profile
from apps.core.guards import CallerContext
from apps.leave.models import LeaveRequest
from apps.organizations.tenancy import (
    can_access_organization,
    find_organization,
    post_login_destination,
    resolve_organization_access,
    scope_to_caller,
)


@pytest.mark.django_db
class TestResolveOrganizationAccess:
    def test_member_is_allowed(self, staff_user, organization):
        access = resolve_organization_access(staff_user.profile, "acme-clinic")
        assert access.allowed
        assert access.organization == organization

    def test_member_of_other_org_is_sent_home(self, other_admin, organization):
        access = resolve_organization_access(other_admin.profile, "acme-clinic")
        assert not access.allowed
        assert access.redirect_to == "/org/globex/dashboard"

    def test_unknown_slug(self, staff_user):
        assert resolve_organization_access(staff_user.profile, "nope").not_found

    def test_no_profile(self, organization):
        assert resolve_organization_access(None, "acme-clinic").redirect_to == "/login"

    def test_profile_without_organization(self, organization, make_member):
        user = make_member("drifter@acme.test", None)
        assert resolve_organization_access(user.profile, "acme-clinic").redirect_to == "/login"

    def test_can_access_organization(self, staff_user, organization, other_organization):
        assert can_access_organization(staff_user.profile, organization.pk)
        assert can_access_organization(staff_user.profile, str(organization.pk))
        assert not can_access_organization(staff_user.profile, other_organization.pk)
        assert not can_access_organization(None, organization.pk)


@pytest.mark.django_db
class TestScopeToCaller:
    def test_admin_sees_whole_org(self, admin_user, leave_request, other_admin, other_organization, leave_type):
        LeaveRequest.objects.create(
            user=other_admin,
            organization=other_organization,
            leave_type=leave_type,
            submission_date=leave_request.submission_date,
            start_date=leave_request.start_date,
            end_date=leave_request.end_date,
            reason="Elsewhere",
        )

        visible = scope_to_caller(LeaveRequest.objects.all(), CallerContext.for_user(admin_user))

        assert list(visible) == [leave_request]

    def test_staff_sees_only_own_rows(self, staff_user, leave_request, organization, make_member):
        colleague = make_member("kim@acme.test", organization)

        assert list(scope_to_caller(LeaveRequest.objects.all(), CallerContext.for_user(staff_user))) == [leave_request]
        assert not scope_to_caller(LeaveRequest.objects.all(), CallerContext.for_user(colleague)).exists()

    def test_anonymous_sees_nothing(self, leave_request):
        assert not scope_to_caller(LeaveRequest.objects.all(), CallerContext.anonymous()).exists()


@pytest.mark.django_db
class TestPostLoginDestination:
    def test_member_goes_to_org_dashboard(self, staff_user):
        assert post_login_destination(staff_user) == "/org/acme-clinic/dashboard"

    def test_anonymous(self):
        assert post_login_destination(None) == "/login?error=auth"

    def test_missing_profile(self, django_user_model):
        user = django_user_model.objects.create_user(email="bare@acme.test", password="testpass123")
        assert post_login_destination(user) == "/login?error=no_profile"

    def test_missing_organization(self, make_member):
        user = make_member("drifter@acme.test", None, role=Profile.Role.STAFF)
        assert post_login_destination(user) == "/login?error=no_org"


@pytest.mark.django_db
class TestFindOrganization:
    def test_by_name_ignoring_case(self, organization):
        assert find_organization("acme CLINIC") == organization

    def test_by_slug(self, organization):
        assert find_organization("acme-clinic") == organization

    def test_blank_or_unknown(self, organization):
        assert find_organization("") is None
        assert find_organization("Initech") is None
