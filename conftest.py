"""Shared fixtures: two tenants, their admins and a staff member."""

import datetime

import pytest

from apps.accounts.models import Profile, User
from apps.leave.models import LeaveRequest, LeaveType
from apps.organizations.models import Organization


def create_member(email, organization, role=Profile.Role.STAFF, full_name=None):
    user = User.objects.create_user(email=email, password="testpass123")
    Profile.objects.create(
        user=user,
        email=email,
        full_name=full_name or email.split("@")[0].title(),
        role=role,
        organization=organization,
    )
    return user


@pytest.fixture
def make_member(db):
    """Factory for users with a profile in a given organization."""
    return create_member


@pytest.fixture
def organization(db):
    return Organization.objects.create(
        name="Acme Clinic",
        slug="acme-clinic",
        admin_email="boss@acme.test",
    )


@pytest.fixture
def other_organization(db):
    return Organization.objects.create(
        name="Globex",
        slug="globex",
        admin_email="admin@globex.test",
    )


@pytest.fixture
def admin_user(db, organization):
    return create_member("boss@acme.test", organization, role=Profile.Role.ADMIN, full_name="Ada Boss")


@pytest.fixture
def staff_user(db, organization):
    return create_member("sam@acme.test", organization, full_name="Sam Staff")


@pytest.fixture
def other_admin(db, other_organization):
    return create_member("admin@globex.test", other_organization, role=Profile.Role.ADMIN)


@pytest.fixture
def leave_type(db):
    return LeaveType.objects.create(name="Vacation")


@pytest.fixture
def day_off_type(db):
    return LeaveType.objects.create(name="Day Off", is_single_day=True)


@pytest.fixture
def leave_request(db, staff_user, organization, leave_type):
    return LeaveRequest.objects.create(
        user=staff_user,
        organization=organization,
        leave_type=leave_type,
        submission_date=datetime.date(2025, 1, 2),
        start_date=datetime.date(2025, 1, 15),
        end_date=datetime.date(2025, 1, 20),
        reason="Family trip",
    )


@pytest.fixture
def identity_enabled(settings):
    """Turn route enforcement on."""
    settings.IDENTITY_SERVICE_URL = "https://identity.staffhub.test"
    return settings
