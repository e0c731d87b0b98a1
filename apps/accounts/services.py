"""Staff self-registration."""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError

from apps.core.results import ErrorKind, Result, validation_error
from apps.organizations.models import Organization

from .identity import IdentityError, get_identity_provider
from .models import Profile

logger = logging.getLogger(__name__)


class StaffRegistrationService:
    """Creates a staff identity bound to an existing organization."""

    def __init__(self, identity_provider=None):
        self.identity = identity_provider or get_identity_provider()

    def register(self, full_name, email, password, organization_id) -> Result:
        if not all([full_name, email, password, organization_id]):
            return Result.failure(ErrorKind.VALIDATION_MISSING_FIELD, 400, "All fields are required")
        if not all(isinstance(value, str) for value in (full_name, email, password)):
            return validation_error("All fields must be text")

        min_length = settings.STAFFHUB_PASSWORD_MIN_LENGTH
        if len(password) < min_length:
            return validation_error(f"Password must be at least {min_length} characters")

        try:
            organization = Organization.objects.filter(pk=organization_id).first()
        except (ValueError, ValidationError):
            organization = None
        if organization is None:
            return validation_error("Please enter a valid organization name")

        try:
            user = self.identity.create_user(
                email=email,
                password=password,
                full_name=full_name,
                role=Profile.Role.STAFF,
                organization=organization,
            )
        except IdentityError as e:
            kind = ErrorKind.VALIDATION_INVALID if e.status == 400 else ErrorKind.INTERNAL
            return Result.failure(kind, e.status, e.message)

        logger.info("Staff user %s joined organization %s", user.pk, organization.pk)
        return Result.success(user)
