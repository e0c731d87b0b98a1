"""User and Profile models."""

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models

from apps.core.models import TimeStampedModel

from .managers import UserManager


class User(AbstractUser):
    """Custom user model using email as the primary identifier."""

    # Remove username field, use email instead
    username = None
    email = models.EmailField("email address", unique=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        ordering = ["email"]

    def __str__(self):
        return self.email


class Profile(TimeStampedModel):
    """
    Per-user profile holding the tenant binding and role.

    ``organization`` stays null until the registration procedure (or staff
    sign-up) binds the user to a tenant. Guards never write to it.
    """

    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        STAFF = "staff", "Staff"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    email = models.EmailField()
    full_name = models.CharField(max_length=200)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.STAFF)
    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="profiles",
    )

    class Meta:
        ordering = ["full_name"]
        indexes = [
            models.Index(fields=["organization"], name="profile_org_idx"),
            models.Index(fields=["role"], name="profile_role_idx"),
        ]

    def __str__(self):
        return f"{self.full_name} <{self.email}> ({self.role})"

    @property
    def is_admin(self):
        """Check if the profile carries the admin role."""
        return self.role == self.Role.ADMIN
