"""URL configuration for accounts app."""

from django.urls import path

from . import views

app_name = "accounts"

urlpatterns = [
    path("api/register/", views.StaffRegisterAPIView.as_view(), name="register"),
    path("login", views.SignInView.as_view(), name="login"),
    path("logout/", views.SignOutView.as_view(), name="logout"),
    path("auth/callback/", views.AuthCallbackView.as_view(), name="auth_callback"),
]
