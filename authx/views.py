import logging

from django.contrib.auth import get_user_model, login, logout
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken

from events.services import get_event, get_registration, link_registrations
from events.views.generics import api_error
from teams import services as team_services
from teams.permissions import is_teams_admin
from users.serializers import UserSerializer
from .serializers import OnboardingSerializer, ParticipantLoginSerializer, AdminLoginSerializer

logger = logging.getLogger("teams.auth")

User = get_user_model()


def token_pair(user):
    refresh = RefreshToken.for_user(user)
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }


class OnboardingView(APIView):
    """
    POST /api/auth/onboarding/  {"name", "username", "password", "email"?}

    Completes the participant profile, links roster rows by email and
    queues the participant in the default event's random pool when they
    are registered for a day and not yet in a team.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = OnboardingSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error("Missing required fields.", status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        user = request.user
        email = (user.email or data.get("email") or "").strip().lower()
        if not email:
            return api_error("Missing required fields.", status.HTTP_400_BAD_REQUEST)

        if User.objects.filter(username=data["username"]).exclude(pk=user.pk).exists():
            return api_error("Username already taken. Choose another.", status.HTTP_409_CONFLICT)

        # email is the identity key; it may belong to one account only
        if User.objects.filter(email=email).exclude(pk=user.pk).exists():
            return api_error("Email already registered to another account.", status.HTTP_409_CONFLICT)

        user.email = email
        user.name = data["name"].strip()
        user.username = data["username"]
        user.set_password(data["password"])
        user.is_onboarded = True
        user.save()

        link_registrations(user)

        queued = False
        event = get_event()
        if event is not None:
            reg = get_registration(user, event)
            if reg is not None:
                if not user.reg_no and reg.reg_no and not User.objects.filter(reg_no=reg.reg_no).exists():
                    user.reg_no = reg.reg_no
                    user.save(update_fields=["reg_no"])
                if team_services.find_membership(user, event) is None:
                    _, queued = team_services.enqueue_random(user, event)

        logger.info(f"Onboarding complete: user={user.id} queued={queued}")

        return Response(
            {
                "message": "Profile completed. Welcome!",
                "user": UserSerializer(user).data,
                "queued_for_random_team": queued,
            },
            status=status.HTTP_200_OK,
        )


class ParticipantLoginView(APIView):
    """
    POST /api/auth/login/  {"reg_no", "password"}
    """
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_scope = "participant-login"

    def post(self, request):
        serializer = ParticipantLoginSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error("Missing registration number or password.", status.HTTP_400_BAD_REQUEST)

        user = serializer.find_user()
        if user is None:
            return api_error("Registration number not found in our records.", status.HTTP_404_NOT_FOUND)

        if not user.is_active or not user.check_password(serializer.validated_data["password"]):
            return api_error("Invalid password.", status.HTTP_401_UNAUTHORIZED)

        logger.info(f"Participant login: user={user.id}")
        return Response(
            {
                "message": f"Welcome back, {user.display_name}!",
                "user": UserSerializer(user).data,
                **token_pair(user),
            },
            status=status.HTTP_200_OK,
        )


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)


class AdminLoginView(APIView):
    """
    POST /api/auth/admin/login/  {"username", "password"}

    Starts a Django session for the admin dashboard.
    """
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_scope = "admin-login"

    def post(self, request):
        if not request.data.get("username") or not request.data.get("password"):
            return api_error("Missing username or password.", status.HTTP_400_BAD_REQUEST)

        serializer = AdminLoginSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Rejected admin login for username={request.data.get('username')!r}")
            return api_error("Invalid credentials.", status.HTTP_401_UNAUTHORIZED)

        user = serializer.validated_data["user"]
        login(request, user)

        logger.info(f"Admin login: user={user.id}")
        return Response(
            {
                "message": "Admin login successful.",
                "admin": {"id": user.id, "username": user.username},
            },
            status=status.HTTP_200_OK,
        )


class AdminLogoutView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        logout(request)
        return Response({"message": "Logged out successfully"})


class AdminSessionView(APIView):
    """GET /api/auth/admin/session/"""
    permission_classes = [AllowAny]

    def get(self, request):
        if not is_teams_admin(request.user):
            return Response({"is_authenticated": False}, status=status.HTTP_401_UNAUTHORIZED)

        return Response({
            "is_authenticated": True,
            "admin": {"id": request.user.id, "username": request.user.username},
        })
