# core/supabase_auth.py
# Custom DRF authentication class to verify Supabase JWTs

import logging
import jwt
from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

logger = logging.getLogger("teams.auth")

User = get_user_model()


class SupabaseJWTAuthentication(BaseAuthentication):
    """
    Custom authentication class that validates Supabase JWTs.

    Participants sign in on the frontend with Supabase auth. This
    authenticator:
    1. Extracts the JWT from the Authorization header
    2. Verifies the token signature using the Supabase JWT secret
    3. Looks up or creates a participant by the token's email claim
    """

    def authenticate(self, request):
        auth_header = request.headers.get("Authorization", "")

        if not auth_header.startswith("Bearer "):
            return None  # Let other auth backends handle it

        supabase_jwt_secret = settings.SUPABASE_JWT_SECRET
        if not supabase_jwt_secret:
            return None

        token = auth_header.split(" ", 1)[1]

        try:
            # Supabase uses HS256 by default
            payload = jwt.decode(
                token,
                supabase_jwt_secret,
                algorithms=["HS256"],
                audience="authenticated",
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationFailed("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid Supabase token: {e}")
            return None  # Let other auth backends try (SimpleJWT tokens land here)

        supabase_user_id = payload.get("sub")
        if not supabase_user_id:
            raise AuthenticationFailed("Invalid token: missing user ID")

        user = self._get_or_create_user(payload.get("email"), payload)
        return (user, payload)

    def authenticate_header(self, request):
        return "Bearer"

    def _get_or_create_user(self, email, payload: dict):
        """
        Participants are keyed by email; the first request creates a
        not-yet-onboarded account.
        """
        if not email:
            raise AuthenticationFailed("Token missing email claim")

        email = email.strip().lower()
        user = User.objects.filter(email=email).first()
        if user is not None:
            return user

        # Ensure unique username
        base_username = email.split("@")[0]
        username = base_username
        counter = 1
        while User.objects.filter(username=username).exists():
            username = f"{base_username}_{counter}"
            counter += 1

        metadata = payload.get("user_metadata") or {}
        user = User.objects.create(
            username=username,
            email=email,
            name=metadata.get("full_name") or metadata.get("name") or "",
            role=User.ROLE_PARTICIPANT,
        )
        user.set_unusable_password()
        user.save(update_fields=["password"])
        logger.info(f"Created new participant from Supabase: {email}")
        return user
