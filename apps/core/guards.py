"""
Authorization guard chain for privileged mutations.

Each guard is an independent predicate returning a ``Result``. Guards are
composed with ``run_guards`` which evaluates them strictly in order and
stops at the first failure, so an anonymous caller always gets 401 before
any role or organization check is made.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from apps.accounts.models import Profile

from .results import ErrorKind, Result, unauthorized

ADMIN_REQUIRED_MESSAGE = "Forbidden - Admin access required"
ORG_MISMATCH_MESSAGE = "Forbidden - Organization mismatch"


@dataclass(frozen=True)
class CallerContext:
    """The identity of the caller, resolved once at the request boundary."""

    user_id: Optional[int] = None
    profile: Optional[Profile] = None

    @classmethod
    def anonymous(cls) -> "CallerContext":
        return cls()

    @classmethod
    def for_user(cls, user) -> "CallerContext":
        """Build a context for a user, loading their profile if it exists."""
        if user is None or not user.is_authenticated:
            return cls.anonymous()
        profile = Profile.objects.filter(user_id=user.pk).select_related("organization").first()
        return cls(user_id=user.pk, profile=profile)

    @classmethod
    def from_request(cls, request) -> "CallerContext":
        return cls.for_user(getattr(request, "user", None))

    @property
    def organization_id(self):
        if self.profile is None:
            return None
        return self.profile.organization_id


def check_authentication(user_id) -> Result:
    """Fail with 401 when there is no caller identity."""
    if user_id is None:
        return unauthorized()
    return Result.success(user_id)


def check_admin_role(profile) -> Result:
    """Fail with 403 unless the profile exists and its role is exactly 'admin'."""
    if profile is None or profile.role != Profile.Role.ADMIN.value:
        return Result.failure(ErrorKind.FORBIDDEN_ADMIN_REQUIRED, 403, ADMIN_REQUIRED_MESSAGE)
    return Result.success(profile)


def check_organization_ownership(profile_org_id, requested_org_id) -> Result:
    """Fail with 403 unless both ids are present and exactly equal as strings."""
    if profile_org_id is None or requested_org_id is None:
        return Result.failure(ErrorKind.FORBIDDEN_ORG_MISMATCH, 403, ORG_MISMATCH_MESSAGE)
    if str(profile_org_id) != str(requested_org_id):
        return Result.failure(ErrorKind.FORBIDDEN_ORG_MISMATCH, 403, ORG_MISMATCH_MESSAGE)
    return Result.success(requested_org_id)


def validate_required_field(value, field_name: str) -> Result:
    """Fail with 400 when a required value is absent or empty."""
    if value is None or (hasattr(value, "__len__") and len(value) == 0):
        return Result.failure(
            ErrorKind.VALIDATION_MISSING_FIELD, 400, f"{field_name} is required"
        )
    return Result.success(value)


def run_guards(*checks: Callable[[], Result]) -> Result:
    """
    Run guard thunks in order, returning the first failure.

    Guards are passed as zero-argument callables so that later guards (which
    may need data loaded after an earlier guard passed) are never evaluated
    once an earlier one has failed.
    """
    result = Result.success()
    for check in checks:
        result = check()
        if not result.ok:
            return result
    return result


def require_org_admin(caller: CallerContext, organization_id) -> Result:
    """Guard chain steps 1-3: authenticated, admin, owns the organization."""
    return run_guards(
        lambda: check_authentication(caller.user_id),
        lambda: check_admin_role(caller.profile),
        lambda: check_organization_ownership(caller.organization_id, organization_id),
    )
