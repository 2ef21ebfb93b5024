# core/tests/test_supabase_auth.py
import time
import uuid

import jwt
from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient

User = get_user_model()

SECRET = "test-supabase-secret-with-enough-length-for-hs256"


def make_token(sub, email="new.user@example.com", secret=SECRET, **claims):
    payload = {
        "sub": str(sub),
        "email": email,
        "aud": "authenticated",
        "exp": int(time.time()) + 3600,
        "user_metadata": {"name": "New User"},
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


@override_settings(SUPABASE_JWT_SECRET=SECRET, SUPABASE_JWT_AUDIENCE="authenticated")
class SupabaseAuthenticationTest(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_first_request_creates_user_with_subject_id(self):
        subject = uuid.uuid4()
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(subject)}")

        resp = self.client.get("/api/auth/me/")

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["id"], str(subject))
        user = User.objects.get(pk=subject)
        self.assertEqual(user.name, "New User")
        self.assertFalse(user.has_usable_password())

    def test_existing_user_is_reused(self):
        user = User.objects.create_user(username="new.user", password="pass123")
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(user.pk)}")

        resp = self.client.get("/api/auth/me/")

        self.assertEqual(resp.data["username"], "new.user")
        self.assertEqual(User.objects.count(), 1)

    def test_username_collision_gets_suffix(self):
        User.objects.create_user(username="new.user", password="pass123")
        subject = uuid.uuid4()
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(subject)}")

        self.client.get("/api/auth/me/")

        self.assertEqual(User.objects.get(pk=subject).username, "new.user_1")

    def test_expired_token_is_rejected(self):
        token = make_token(uuid.uuid4(), exp=int(time.time()) - 10)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        resp = self.client.get("/api/auth/me/")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_token_signed_with_other_secret_is_not_trusted(self):
        token = make_token(uuid.uuid4(), secret="some-other-secret-that-is-also-long-enough")
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        resp = self.client.get("/api/auth/me/")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(User.objects.count(), 0)


class HealthCheckTest(TestCase):
    def test_health_is_public(self):
        resp = APIClient().get("/api/health/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.data["db"])
