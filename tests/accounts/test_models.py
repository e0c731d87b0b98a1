"""Tests for accounts models."""

import pytest
from django.contrib.auth import get_user_model

from apps.accounts.models import Profile

User = get_user_model()


@pytest.mark.django_db
class TestUser:
    """Tests for User model."""

    def test_create_user(self):
        """Test creating a regular user."""
        user = User.objects.create_user(email="test@example.com", password="testpass123")
        assert user.email == "test@example.com"
        assert user.check_password("testpass123")
        assert not user.is_staff
        assert not user.is_superuser

    def test_create_user_requires_email(self):
        with pytest.raises(ValueError):
            User.objects.create_user(email="", password="testpass123")

    def test_create_superuser(self):
        """Test creating a superuser."""
        user = User.objects.create_superuser(email="root@example.com", password="testpass123")
        assert user.is_staff
        assert user.is_superuser

    def test_email_is_normalized(self):
        user = User.objects.create_user(email="test@EXAMPLE.COM", password="testpass123")
        assert user.email == "test@example.com"


@pytest.mark.django_db
class TestProfile:
    """Tests for Profile model."""

    def test_role_defaults_to_staff(self):
        user = User.objects.create_user(email="test@example.com", password="testpass123")
        profile = Profile.objects.create(user=user, email=user.email, full_name="Test User")
        assert profile.role == Profile.Role.STAFF
        assert not profile.is_admin
        assert profile.organization is None

    def test_is_admin(self, admin_user):
        assert admin_user.profile.is_admin

    def test_profile_str(self, staff_user):
        assert str(staff_user.profile) == "Sam Staff <sam@acme.test> (staff)"

    def test_deleting_organization_keeps_profile(self, staff_user, organization):
        organization.delete()
        profile = Profile.objects.get(user=staff_user)
        assert profile.organization is None
