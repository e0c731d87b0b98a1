"""Identity subsystem: the single seam used to create user identities."""

import logging

from django.db import DatabaseError, IntegrityError, transaction

from .models import Profile, User

logger = logging.getLogger(__name__)


class IdentityError(Exception):
    """Raised when an identity cannot be created."""

    def __init__(self, message: str, status: int = 500):
        super().__init__(message)
        self.message = message
        self.status = status


class IdentityProvider:
    """
    Creates users and their profiles.

    The profile is created alongside the user with the requested role, the
    way a sign-up hook would. The organization binding is left to the
    caller so that registration can apply it as a separate step.
    """

    def email_taken(self, email: str) -> bool:
        return User.objects.filter(email__iexact=email).exists()

    def create_user(
        self,
        email: str,
        password: str,
        full_name: str,
        role: str = Profile.Role.STAFF,
        organization=None,
    ) -> User:
        """Create a user with a hashed password and an attached profile."""
        if self.email_taken(email):
            raise IdentityError(
                "A user with this email address has already been registered",
                status=400,
            )

        try:
            with transaction.atomic():
                user = User.objects.create_user(email=email, password=password)
                Profile.objects.create(
                    user=user,
                    email=user.email,
                    full_name=full_name or email.split("@")[0],
                    role=role,
                    organization=organization,
                )
        except IntegrityError as e:
            raise IdentityError(
                "A user with this email address has already been registered",
                status=400,
            ) from e
        except DatabaseError as e:
            logger.error("Failed to create identity for %s: %s", email, e)
            raise IdentityError("Failed to create user account") from e

        logger.info("Created %s identity %s", role, user.pk)
        return user


def get_identity_provider() -> IdentityProvider:
    """Return the identity provider used by services."""
    return IdentityProvider()
