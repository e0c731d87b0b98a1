"""Helpers that keep every read and redirect inside the caller's organization."""

import logging
from dataclasses import dataclass
from typing import Optional

from django.db.models import QuerySet

from apps.accounts.models import Profile
from apps.core.guards import CallerContext
from apps.core.routing import LOGIN_PATH

from .models import Organization
from .services import generate_slug

logger = logging.getLogger(__name__)


def can_access_organization(profile: Optional[Profile], organization_id) -> bool:
    """Check if a profile belongs to the given organization (exact id match)."""
    if profile is None or profile.organization_id is None or organization_id is None:
        return False
    return str(profile.organization_id) == str(organization_id)


@dataclass(frozen=True)
class OrganizationAccess:
    """Outcome of resolving a caller against an org-scoped URL."""

    organization: Optional[Organization] = None
    redirect_to: Optional[str] = None
    not_found: bool = False

    @property
    def allowed(self) -> bool:
        return self.organization is not None and self.redirect_to is None


def resolve_organization_access(profile: Optional[Profile], slug: str) -> OrganizationAccess:
    """
    Decide what happens when a caller opens ``/org/<slug>/...``.

    Members of the organization are allowed. Members of another organization
    are redirected to their own dashboard, callers without an organization
    to the login page, and unknown slugs are not found.
    """
    if profile is None:
        return OrganizationAccess(redirect_to=LOGIN_PATH)

    organization = Organization.objects.filter(slug=slug).first()
    if organization is None:
        return OrganizationAccess(not_found=True)

    if can_access_organization(profile, organization.pk):
        return OrganizationAccess(organization=organization)

    if profile.organization_id is not None:
        own = Organization.objects.filter(pk=profile.organization_id).only("slug").first()
        if own is not None:
            logger.info(
                "Profile %s tried organization %s; redirecting to %s",
                profile.pk,
                organization.slug,
                own.slug,
            )
            return OrganizationAccess(redirect_to=own.dashboard_path)

    return OrganizationAccess(redirect_to=LOGIN_PATH)


def scope_to_caller(queryset: QuerySet, caller: CallerContext, owner_field: str = "user") -> QuerySet:
    """
    Restrict an organization-owned queryset to what the caller may see.

    Admins see every row in their organization, staff only rows they own,
    and callers without an organization see nothing.
    """
    if caller.profile is None or caller.organization_id is None:
        return queryset.none()
    queryset = queryset.filter(organization_id=caller.organization_id)
    if caller.profile.is_admin:
        return queryset
    return queryset.filter(**{f"{owner_field}_id": caller.user_id})


def post_login_destination(user) -> str:
    """Return where a freshly signed-in user should land."""
    if user is None or not user.is_authenticated:
        return f"{LOGIN_PATH}?error=auth"

    profile = Profile.objects.filter(user_id=user.pk).first()
    if profile is None:
        logger.error("Auth callback: no profile for user %s", user.pk)
        return f"{LOGIN_PATH}?error=no_profile"

    if profile.organization_id is None:
        logger.error("Auth callback: user %s has no organization assigned", user.pk)
        return f"{LOGIN_PATH}?error=no_org"

    organization = Organization.objects.filter(pk=profile.organization_id).first()
    if organization is None or not organization.slug:
        logger.error("Auth callback: organization %s not found", profile.organization_id)
        return f"{LOGIN_PATH}?error=org_not_found"

    return organization.dashboard_path


def find_organization(query: str) -> Optional[Organization]:
    """Look up an organization by case-insensitive name or by exact slug."""
    query = (query or "").strip()
    if not query:
        return None
    organization = Organization.objects.filter(name__iexact=query).first()
    if organization is not None:
        return organization
    return Organization.objects.filter(slug=generate_slug(query)).first()
