"""Organization (tenant) model."""

import uuid

from django.db import models

from apps.core.models import TimeStampedModel


class Organization(TimeStampedModel):
    """A tenant. Every profile, leave request and recipient belongs to one."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    # Suffixed slugs ("name-12") may exceed the derived 50-character base
    slug = models.SlugField(max_length=64, unique=True)
    admin_email = models.EmailField()
    google_sheet_id = models.CharField(max_length=200, null=True, blank=True)
    settings = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["admin_email"], name="organization_admin_email_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.slug})"

    @property
    def dashboard_path(self):
        """Return the org-scoped dashboard path."""
        return f"/org/{self.slug}/dashboard"

    def to_summary(self) -> dict:
        """Return the public summary used in API responses."""
        return {"id": str(self.pk), "name": self.name, "slug": self.slug}
