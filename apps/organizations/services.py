"""Organization registration and administrative services."""

import logging
import re

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction

from apps.accounts.identity import IdentityError, get_identity_provider
from apps.accounts.models import Profile
from apps.core.guards import (
    CallerContext,
    check_admin_role,
    check_authentication,
    check_organization_ownership,
    run_guards,
    validate_required_field,
)
from apps.core.results import ErrorKind, Result, internal_error, validation_error
from apps.notifications.models import NotificationRecipient
from apps.notifications.services import normalize_recipient_email

from .models import Organization

logger = logging.getLogger(__name__)

# Storage-level unique violations tolerated before giving up on a slug
MAX_SLUG_CONFLICT_RETRIES = 3


def generate_slug(name: str, max_length: int | None = None) -> str:
    """
    Derive a URL-safe slug from an organization name.

    Lower-cases, strips everything except ASCII letters, digits, whitespace
    and hyphens, turns whitespace runs into a hyphen, collapses repeated
    hyphens and truncates.
    """
    if max_length is None:
        max_length = settings.STAFFHUB_SLUG_MAX_LENGTH
    slug = name.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug[:max_length]


def slug_candidates(base: str, probe_limit: int):
    """Yield ``base``, ``base-1``, ``base-2`` ... up to ``base-<probe_limit>``."""
    yield base
    for suffix in range(1, probe_limit + 1):
        yield f"{base}-{suffix}"


def resolve_unique_slug(base: str, probe_limit: int | None = None) -> str | None:
    """
    Return the first unused slug candidate, or None past the probe limit.

    The probe is not atomic with the insert that follows it; the unique
    constraint on ``Organization.slug`` is what actually guarantees
    uniqueness.
    """
    if probe_limit is None:
        probe_limit = settings.STAFFHUB_SLUG_PROBE_LIMIT
    for candidate in slug_candidates(base, probe_limit):
        if not Organization.objects.filter(slug=candidate).exists():
            return candidate
    return None


def slug_conflict() -> Result:
    return Result.failure(ErrorKind.CONFLICT_SLUG_TAKEN, 409, "Organization slug is already taken")


class RegistrationService:
    """
    Creates a tenant organization together with its first admin.

    The organization row and the admin identity live in different
    subsystems, so the procedure runs as a two-step saga: if the identity
    cannot be created, the organization is deleted again before the error
    is returned. Profile binding and the first notification recipient are
    best-effort follow-ups.
    """

    def __init__(self, identity_provider=None):
        self.identity = identity_provider or get_identity_provider()

    def validate(self, organization_name, admin_name, admin_email, password) -> Result:
        if not all([organization_name, admin_name, admin_email, password]):
            return Result.failure(ErrorKind.VALIDATION_MISSING_FIELD, 400, "All fields are required")
        fields = (organization_name, admin_name, admin_email, password)
        if not all(isinstance(value, str) for value in fields):
            return validation_error("All fields must be text")
        if "@" not in admin_email:
            return validation_error("Admin email must be a valid email address")

        min_length = settings.STAFFHUB_PASSWORD_MIN_LENGTH
        if len(password) < min_length:
            return validation_error(f"Password must be at least {min_length} characters")

        if not re.search(r"[a-z0-9]", generate_slug(organization_name)):
            return validation_error("Organization name must contain at least one letter or number")
        return Result.success()

    def register(self, organization_name, admin_name, admin_email, password) -> Result:
        """Run the registration procedure. Success carries the Organization."""
        result = self.validate(organization_name, admin_name, admin_email, password)
        if not result.ok:
            return result

        result = self.create_organization(organization_name.strip(), admin_email)
        if not result.ok:
            return result
        organization = result.value

        result = self.create_admin(organization, admin_name, admin_email, password)
        if not result.ok:
            self.rollback_organization(organization)
            return result
        user = result.value

        self.bind_admin_profile(user, organization)
        self.add_first_recipient(user, organization, admin_name, admin_email)

        logger.info(
            "Registered organization %s (%s) with admin %s",
            organization.pk,
            organization.slug,
            user.pk,
        )
        return Result.success(organization)

    def create_organization(self, name: str, admin_email: str) -> Result:
        """Insert the organization under the first free slug."""
        base_slug = generate_slug(name)

        for attempt in range(1, MAX_SLUG_CONFLICT_RETRIES + 1):
            slug = resolve_unique_slug(base_slug)
            if slug is None:
                logger.warning("Slug probe exhausted for base slug %r", base_slug)
                return slug_conflict()

            try:
                with transaction.atomic():
                    organization = Organization.objects.create(
                        name=name,
                        slug=slug,
                        admin_email=admin_email,
                    )
            except IntegrityError:
                # Another registration claimed the slug between probe and insert
                logger.warning(
                    "Slug %r taken concurrently (attempt %d of %d)",
                    slug,
                    attempt,
                    MAX_SLUG_CONFLICT_RETRIES,
                )
                continue
            except DatabaseError:
                logger.exception("Error creating organization %r", name)
                return internal_error("Failed to create organization")

            return Result.success(organization)

        return slug_conflict()

    def create_admin(self, organization, admin_name, admin_email, password) -> Result:
        """Create the admin identity for a new organization."""
        try:
            user = self.identity.create_user(
                email=admin_email,
                password=password,
                full_name=admin_name,
                role=Profile.Role.ADMIN,
            )
        except IdentityError as e:
            logger.error("Error creating admin user for organization %s: %s", organization.pk, e)
            kind = ErrorKind.VALIDATION_INVALID if e.status == 400 else ErrorKind.INTERNAL
            return Result.failure(kind, e.status, e.message)
        except Exception:
            logger.exception("Unexpected error creating admin user for organization %s", organization.pk)
            return internal_error("Failed to create admin account")
        return Result.success(user)

    def rollback_organization(self, organization) -> None:
        """Compensating action: remove an organization whose admin was never created."""
        logger.warning("Rolling back organization %s (%s)", organization.pk, organization.slug)
        try:
            Organization.objects.filter(pk=organization.pk).delete()
        except DatabaseError:
            logger.critical(
                "Rollback failed; organization %s (%s) has no admin and needs manual cleanup",
                organization.pk,
                organization.slug,
                exc_info=True,
            )

    def bind_admin_profile(self, user, organization) -> None:
        """Best-effort: attach the admin's profile to the organization."""
        try:
            updated = Profile.objects.filter(user=user).update(
                organization=organization,
                role=Profile.Role.ADMIN,
            )
        except DatabaseError:
            logger.exception("Error updating profile for admin %s", user.pk)
            return
        if not updated:
            logger.error("No profile found for admin %s; organization binding skipped", user.pk)

    def add_first_recipient(self, user, organization, admin_name, admin_email) -> None:
        """Best-effort: make the admin the organization's first notification recipient."""
        try:
            with transaction.atomic():
                NotificationRecipient.objects.create(
                    organization=organization,
                    email=normalize_recipient_email(admin_email),
                    name=admin_name,
                    is_active=True,
                    added_by=user,
                )
        except DatabaseError:
            logger.exception("Error adding first notification recipient for %s", organization.pk)


class SheetLinkService:
    """Links an external spreadsheet to an organization."""

    @classmethod
    def link_sheet(cls, caller: CallerContext, sheet_id, organization_id) -> Result:
        """
        Store ``sheet_id`` on the caller's organization.

        Guard order: authenticated, admin, target organization given and
        owned by the caller, sheet id given.
        """
        guard = run_guards(
            lambda: check_authentication(caller.user_id),
            lambda: check_admin_role(caller.profile),
            lambda: validate_required_field(organization_id, "Organization ID"),
            lambda: check_organization_ownership(caller.organization_id, organization_id),
            lambda: validate_required_field(sheet_id, "Sheet ID"),
        )
        if not guard.ok:
            return guard

        try:
            updated = Organization.objects.filter(pk=caller.organization_id).update(
                google_sheet_id=str(sheet_id)
            )
        except DatabaseError:
            logger.exception("Failed to update organization %s with sheet ID", organization_id)
            return internal_error("Failed to save sheet ID to database")

        if not updated:
            logger.error("Organization %s vanished while linking sheet", organization_id)
            return internal_error("Failed to save sheet ID to database")

        logger.info("Linked sheet to organization %s", organization_id)
        return Result.success(sheet_id)
