from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

User = get_user_model()


class LocalAuthTest(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_signup_login_and_me(self):
        resp = self.client.post(
            "/api/auth/signup/",
            {"username": "maria", "email": "maria@example.com", "password": "s3cret-pass", "role": "organizer"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.data)
        self.assertEqual(User.objects.get(username="maria").role, "organizer")

        resp = self.client.post(
            "/api/auth/login/",
            {"email": "maria@example.com", "password": "s3cret-pass"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.data)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.data['access']}")
        resp = self.client.get("/api/auth/me/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["email"], "maria@example.com")

    def test_signup_defaults_to_user_role(self):
        self.client.post(
            "/api/auth/signup/",
            {"username": "sam", "email": "sam@example.com", "password": "s3cret-pass"},
            format="json",
        )
        self.assertEqual(User.objects.get(username="sam").role, User.ROLE_USER)

    def test_bad_password_is_rejected(self):
        User.objects.create_user(username="kim", email="kim@example.com", password="right-pass")
        resp = self.client.post(
            "/api/auth/login/",
            {"email": "kim@example.com", "password": "wrong-pass"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
