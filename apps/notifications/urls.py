"""URL configuration for notifications app."""

from django.urls import path

from . import views

app_name = "notifications"

urlpatterns = [
    path("notification-recipients/", views.AddRecipientAPIView.as_view(), name="add_recipient"),
    path(
        "notification-recipients/<int:pk>/deactivate/",
        views.DeactivateRecipientAPIView.as_view(),
        name="deactivate_recipient",
    ),
]
