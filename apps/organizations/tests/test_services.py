"""Tests for slug derivation, organization registration and sheet linking."""

import logging
from unittest.mock import MagicMock, patch

import pytest
from django.db import DatabaseError
from django.db.models import QuerySet

from apps.accounts.identity import IdentityError
from apps.accounts.models import Profile, User
from apps.core.guards import CallerContext
from apps.core.results import ErrorKind
from apps.notifications.models import NotificationRecipient
from apps.notifications.services import RecipientService
from apps.organizations.models import Organization
from apps.organizations.services import (
    RegistrationService,
    SheetLinkService,
    generate_slug,
    resolve_unique_slug,
)


class TestGenerateSlug:
    def test_lowercases_and_hyphenates(self):
        assert generate_slug("Acme Clinic") == "acme-clinic"
        assert generate_slug("Acme Clinic!!") == "acme-clinic"

    def test_strips_punctuation_and_collapses_hyphens(self):
        assert generate_slug("St. Mary's -- Clinic") == "st-marys-clinic"

    def test_drops_non_ascii(self):
        assert generate_slug("Café Ünion") == "caf-nion"

    def test_truncates(self):
        assert generate_slug("a" * 80) == "a" * 50
        assert generate_slug("Acme Clinic", max_length=4) == "acme"


@pytest.mark.django_db
class TestResolveUniqueSlug:
    def test_free_base_is_used(self):
        assert resolve_unique_slug("acme") == "acme"

    def test_taken_base_gets_first_free_suffix(self, organization):
        Organization.objects.create(name="Acme 2", slug="acme-clinic-1", admin_email="a@b.test")
        assert resolve_unique_slug("acme-clinic") == "acme-clinic-2"

    def test_exhausted_probe_returns_none(self, organization):
        assert resolve_unique_slug("acme-clinic", probe_limit=0) is None


@pytest.mark.django_db
class TestRegistrationService:
    def register(self, service=None, **overrides):
        data = {
            "organization_name": "Northwind Care",
            "admin_name": "Nora Wind",
            "admin_email": "nora@northwind.test",
            "password": "s3cret!",
        }
        data.update(overrides)
        return (service or RegistrationService()).register(**data)

    def test_success_creates_org_admin_and_first_recipient(self):
        result = self.register()

        assert result.ok
        organization = result.value
        assert organization.slug == "northwind-care"
        assert organization.admin_email == "nora@northwind.test"

        profile = Profile.objects.get(email="nora@northwind.test")
        assert profile.role == Profile.Role.ADMIN
        assert profile.organization_id == organization.pk
        assert profile.full_name == "Nora Wind"

        recipient = NotificationRecipient.objects.get(organization=organization)
        assert recipient.email == "nora@northwind.test"
        assert recipient.is_active

    def test_duplicate_name_gets_suffixed_slug(self):
        first = self.register()
        second = self.register(admin_email="other@northwind.test")
        assert first.value.slug == "northwind-care"
        assert second.value.slug == "northwind-care-1"

    @pytest.mark.parametrize("field", ["organization_name", "admin_name", "admin_email", "password"])
    def test_missing_field(self, field):
        result = self.register(**{field: ""})
        assert result.status == 400
        assert result.message == "All fields are required"
        assert not Organization.objects.exists()

    def test_short_password(self):
        result = self.register(password="12345")
        assert result.status == 400
        assert result.message == "Password must be at least 6 characters"

    def test_name_without_slug_characters(self):
        result = self.register(organization_name="!!!")
        assert result.status == 400
        assert not Organization.objects.exists()

    def test_duplicate_admin_email_rolls_back_organization(self, staff_user):
        result = self.register(admin_email=staff_user.email)

        assert result.status == 400
        assert result.message == "A user with this email address has already been registered"
        assert not Organization.objects.filter(name="Northwind Care").exists()

    def test_identity_failure_rolls_back_organization(self):
        identity = MagicMock()
        identity.create_user.side_effect = IdentityError("Failed to create user account")

        result = self.register(service=RegistrationService(identity_provider=identity))

        assert result.status == 500
        assert result.kind == ErrorKind.INTERNAL
        assert not Organization.objects.exists()
        assert resolve_unique_slug("northwind-care") == "northwind-care"

    def test_unexpected_identity_error_rolls_back_organization(self):
        identity = MagicMock()
        identity.create_user.side_effect = RuntimeError("provider down")

        result = self.register(service=RegistrationService(identity_provider=identity))

        assert result.status == 500
        assert result.message == "Failed to create admin account"
        assert not Organization.objects.exists()

    def test_failed_rollback_is_logged_as_critical(self, caplog):
        identity = MagicMock()
        identity.create_user.side_effect = IdentityError("Failed to create user account")

        with patch.object(QuerySet, "delete", side_effect=DatabaseError("locked")):
            with caplog.at_level(logging.CRITICAL, logger="apps.organizations.services"):
                result = self.register(service=RegistrationService(identity_provider=identity))

        assert result.status == 500
        assert "Rollback failed" in caplog.text

    def test_concurrent_slug_claim_is_retried(self, organization):
        with patch(
            "apps.organizations.services.resolve_unique_slug",
            side_effect=["acme-clinic", "acme-clinic-7"],
        ):
            result = self.register(organization_name="Acme Clinic")

        assert result.ok
        assert result.value.slug == "acme-clinic-7"

    def test_repeated_slug_conflicts_return_409(self, organization):
        with patch("apps.organizations.services.resolve_unique_slug", return_value="acme-clinic"):
            result = self.register(organization_name="Acme Clinic")

        assert result.status == 409
        assert result.kind == ErrorKind.CONFLICT_SLUG_TAKEN
        assert Organization.objects.count() == 1

    def test_profile_binding_failure_keeps_registration(self):
        with patch.object(QuerySet, "update", side_effect=DatabaseError("gone")):
            result = self.register()

        assert result.ok
        assert User.objects.filter(email="nora@northwind.test").exists()


@pytest.mark.django_db
class TestSheetLinkService:
    def test_admin_links_sheet_to_own_org(self, admin_user, organization):
        caller = CallerContext.for_user(admin_user)

        result = SheetLinkService.link_sheet(caller, "sheet-123", str(organization.pk))

        assert result.ok
        organization.refresh_from_db()
        assert organization.google_sheet_id == "sheet-123"

    def test_anonymous(self, organization):
        result = SheetLinkService.link_sheet(CallerContext.anonymous(), "sheet-123", str(organization.pk))
        assert result.status == 401

    def test_staff_is_forbidden(self, staff_user, organization):
        result = SheetLinkService.link_sheet(CallerContext.for_user(staff_user), "sheet-123", str(organization.pk))
        assert result.kind == ErrorKind.FORBIDDEN_ADMIN_REQUIRED

    def test_other_org_admin_is_forbidden(self, other_admin, organization):
        result = SheetLinkService.link_sheet(CallerContext.for_user(other_admin), "sheet-123", str(organization.pk))

        assert result.kind == ErrorKind.FORBIDDEN_ORG_MISMATCH
        organization.refresh_from_db()
        assert organization.google_sheet_id is None

    def test_missing_organization_id(self, admin_user):
        result = SheetLinkService.link_sheet(CallerContext.for_user(admin_user), "sheet-123", None)
        assert result.status == 400
        assert result.message == "Organization ID is required"

    def test_missing_sheet_id(self, admin_user, organization):
        result = SheetLinkService.link_sheet(CallerContext.for_user(admin_user), "", str(organization.pk))
        assert result.status == 400
        assert result.message == "Sheet ID is required"

    def test_database_failure(self, admin_user, organization):
        caller = CallerContext.for_user(admin_user)
        with patch.object(QuerySet, "update", side_effect=DatabaseError("down")):
            result = SheetLinkService.link_sheet(caller, "sheet-123", str(organization.pk))

        assert result.status == 500
        assert result.message == "Failed to save sheet ID to database"


@pytest.mark.django_db
class TestFirstRecipientEmail:
    def test_admin_address_is_stored_lowercased(self):
        result = RegistrationService().register(
            organization_name="Northwind Care",
            admin_name="Nora Wind",
            admin_email="Nora@Northwind.TEST",
            password="s3cret!",
        )

        recipient = NotificationRecipient.objects.get(organization=result.value)
        assert recipient.email == "nora@northwind.test"

    def test_re_adding_admin_address_in_other_case_reactivates(self):
        organization = RegistrationService().register(
            organization_name="Northwind Care",
            admin_name="Nora Wind",
            admin_email="Nora@Northwind.TEST",
            password="s3cret!",
        ).value
        admin = User.objects.get(email="Nora@northwind.test")
        NotificationRecipient.objects.filter(organization=organization).update(is_active=False)

        result = RecipientService.add_recipient(
            CallerContext.for_user(admin), str(organization.pk), "NORA@northwind.test"
        )

        assert result.ok
        assert NotificationRecipient.objects.filter(organization=organization).count() == 1
        assert result.value.is_active
