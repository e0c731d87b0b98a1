"""Tests for organization API endpoints and org-scoped pages."""

import pytest

from apps.organizations.models import Organization


@pytest.mark.django_db
class TestRegisterOrganizationAPI:
    url = "/api/register-org/"

    def test_success(self, client):
        response = client.post(
            self.url,
            {
                "organizationName": "Northwind Care",
                "adminName": "Nora Wind",
                "adminEmail": "nora@northwind.test",
                "password": "s3cret!",
            },
            content_type="application/json",
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["organization"]["slug"] == "northwind-care"
        assert body["organization"]["name"] == "Northwind Care"
        assert Organization.objects.filter(pk=body["organization"]["id"]).exists()

    def test_missing_fields(self, client):
        response = client.post(self.url, {"organizationName": "X"}, content_type="application/json")
        assert response.status_code == 400
        assert response.json() == {"error": "All fields are required"}

    def test_invalid_json(self, client):
        response = client.post(self.url, "{not json", content_type="application/json")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON"}


@pytest.mark.django_db
class TestLinkSheetAPI:
    url = "/api/admin/link-sheet/"

    def post(self, client, organization, sheet_id="sheet-abc"):
        return client.post(
            self.url,
            {"sheetId": sheet_id, "organizationId": str(organization.pk)},
            content_type="application/json",
        )

    def test_admin_can_link(self, client, admin_user, organization):
        client.force_login(admin_user)

        response = self.post(client, organization)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Sheet linked successfully"}
        organization.refresh_from_db()
        assert organization.google_sheet_id == "sheet-abc"

    def test_anonymous(self, client, organization):
        response = self.post(client, organization)
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_staff(self, client, staff_user, organization):
        client.force_login(staff_user)
        response = self.post(client, organization)
        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden - Admin access required"}

    def test_cross_tenant(self, client, other_admin, organization):
        client.force_login(other_admin)
        response = self.post(client, organization)
        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden - Organization mismatch"}


@pytest.mark.django_db
class TestOrganizationLookupAPI:
    def test_found(self, client, organization):
        response = client.get("/api/organizations/lookup/", {"q": "Acme Clinic"})
        assert response.status_code == 200
        assert response.json()["organization"]["id"] == str(organization.pk)

    def test_not_found(self, client, organization):
        response = client.get("/api/organizations/lookup/", {"q": "Initech"})
        assert response.status_code == 404
        assert response.json() == {"error": "Organization not found"}


@pytest.mark.django_db
class TestOrganizationPages:
    def test_admin_dashboard(self, client, admin_user, organization, leave_request):
        organization.google_sheet_id = "sheet-1"
        organization.save()
        client.force_login(admin_user)

        response = client.get("/org/acme-clinic/dashboard/")

        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "admin"
        assert body["pendingCount"] == 1
        assert body["googleSheetId"] == "sheet-1"

    def test_staff_dashboard_hides_sheet(self, client, staff_user, organization):
        client.force_login(staff_user)
        body = client.get("/org/acme-clinic/dashboard/").json()
        assert "googleSheetId" not in body

    def test_foreign_member_redirected_to_own_org(self, client, other_admin, organization):
        client.force_login(other_admin)
        response = client.get("/org/acme-clinic/dashboard/")
        assert response.status_code == 302
        assert response["Location"] == "/org/globex/dashboard"

    def test_unknown_slug(self, client, staff_user):
        client.force_login(staff_user)
        assert client.get("/org/does-not-exist/dashboard/").status_code == 404

    def test_requests_filtered_by_status(self, client, admin_user, leave_request):
        client.force_login(admin_user)

        pending = client.get("/org/acme-clinic/requests/", {"status": "pending"}).json()
        approved = client.get("/org/acme-clinic/requests/", {"status": "approved"}).json()

        assert [r["id"] for r in pending["requests"]] == [str(leave_request.pk)]
        assert approved["requests"] == []

    def test_requests_invalid_status(self, client, admin_user):
        client.force_login(admin_user)
        response = client.get("/org/acme-clinic/requests/", {"status": "archived"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid status filter"}
