# authx/urls.py
from django.urls import path
from .views import (
    OnboardingView,
    ParticipantLoginView,
    MeView,
    AdminLoginView,
    AdminLogoutView,
    AdminSessionView,
)
from rest_framework_simplejwt.views import (
    TokenRefreshView,
    TokenVerifyView,
)

urlpatterns = [
    # Participants
    path("onboarding/", OnboardingView.as_view(), name="onboarding"),
    path("login/", ParticipantLoginView.as_view(), name="participant-login"),
    path("me/", MeView.as_view(), name="me"),

    # Admin dashboard session
    path("admin/login/", AdminLoginView.as_view(), name="admin-login"),
    path("admin/logout/", AdminLogoutView.as_view(), name="admin-logout"),
    path("admin/session/", AdminSessionView.as_view(), name="admin-session"),

    # JWT
    path("jwt/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
    path("jwt/verify/", TokenVerifyView.as_view(), name="jwt-verify"),
]
