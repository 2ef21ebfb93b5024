# core/supabase_auth.py
# Custom DRF authentication class to verify Supabase JWTs

import logging
import uuid

import jwt
from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

logger = logging.getLogger("collabdoor.auth")

User = get_user_model()


class SupabaseJWTAuthentication(BaseAuthentication):
    """
    Custom authentication class that validates Supabase JWTs.

    This authenticator:
    1. Extracts the JWT from the Authorization header
    2. Verifies the token signature using the Supabase JWT secret
    3. Looks up or creates the local user whose id equals the token subject
    """

    def authenticate(self, request):
        auth_header = request.headers.get("Authorization", "")

        if not auth_header.startswith("Bearer "):
            return None  # Let other auth backends handle it

        token = auth_header.split(" ")[1]

        secret = getattr(settings, "SUPABASE_JWT_SECRET", "")
        if not secret:
            logger.debug("SUPABASE_JWT_SECRET not configured")
            return None

        try:
            # Supabase uses HS256 by default
            payload = jwt.decode(
                token,
                secret,
                algorithms=["HS256"],
                audience=getattr(settings, "SUPABASE_JWT_AUDIENCE", "authenticated"),
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationFailed("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid Supabase token: {e}")
            return None  # Let other auth backends try

        subject = payload.get("sub")
        if not subject:
            raise AuthenticationFailed("Invalid token: missing user ID")

        try:
            user_id = uuid.UUID(str(subject))
        except ValueError:
            raise AuthenticationFailed("Invalid token: malformed user ID")

        user = self._get_or_create_user(user_id, payload.get("email"), payload)
        return (user, payload)

    def authenticate_header(self, request):
        return 'Bearer realm="api"'

    def _get_or_create_user(self, user_id, email, payload):
        """
        Get or create the local user mirroring the identity provider's account.
        """
        try:
            return User.objects.get(pk=user_id)
        except User.DoesNotExist:
            pass

        if not email:
            raise AuthenticationFailed("Token missing email claim")

        metadata = payload.get("user_metadata") or {}

        username = email.split("@")[0]
        base_username = username
        counter = 1
        while User.objects.filter(username=username).exists():
            username = f"{base_username}_{counter}"
            counter += 1

        user = User.objects.create(
            id=user_id,
            username=username,
            email=email,
            name=metadata.get("name", ""),
            # Password is not used for Supabase auth
        )
        user.set_unusable_password()
        user.save(update_fields=["password"])
        logger.info(f"Created new user from Supabase: {email}")
        return user
