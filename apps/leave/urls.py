"""URL configuration for leave app."""

from django.urls import path

from . import views

app_name = "leave"

urlpatterns = [
    path("api/leave-requests/", views.SubmitLeaveRequestAPIView.as_view(), name="submit"),
    path(
        "api/leave-requests/<uuid:request_id>/approve/",
        views.ApproveLeaveRequestAPIView.as_view(),
        name="approve",
    ),
    path(
        "api/leave-requests/<uuid:request_id>/deny/",
        views.DenyLeaveRequestAPIView.as_view(),
        name="deny",
    ),
]
