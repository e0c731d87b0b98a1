"""URL configuration for organizations app."""

from django.urls import path

from . import views

app_name = "organizations"

urlpatterns = [
    # JSON API
    path("api/register-org/", views.RegisterOrganizationAPIView.as_view(), name="register_org"),
    path("api/admin/link-sheet/", views.LinkSheetAPIView.as_view(), name="link_sheet"),
    path("api/organizations/lookup/", views.OrganizationLookupAPIView.as_view(), name="lookup"),

    # Org-scoped pages
    path("org/<slug:slug>/dashboard/", views.OrganizationDashboardView.as_view(), name="dashboard"),
    path("org/<slug:slug>/requests/", views.OrganizationRequestsView.as_view(), name="requests"),
]
