# announcements/tests/test_announcements.py
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from announcements.models import AnnouncementBanner
from announcements.services import create_announcement, deactivate_announcement, get_active_announcements

User = get_user_model()


class AnnouncementServiceTest(TestCase):
    def setUp(self):
        self.staff = User.objects.create_user(username="staff", password="pass123", is_staff=True)

    def test_only_current_active_banners_are_shown(self):
        now = timezone.now()
        current = create_announcement(self.staff, {"title": "Maintenance", "message": "Saturday 2am"})
        create_announcement(self.staff, {
            "title": "Old news",
            "message": "Expired",
            "start_date": now - timedelta(days=3),
            "end_date": now - timedelta(days=1),
        })
        create_announcement(self.staff, {
            "title": "Coming soon",
            "message": "Not yet",
            "start_date": now + timedelta(days=1),
        })
        create_announcement(self.staff, {"title": "Hidden", "message": "Off", "is_active": False})

        self.assertEqual(list(get_active_announcements()), [current])

    def test_title_and_message_are_required(self):
        with self.assertRaises(ValidationError):
            create_announcement(self.staff, {"title": "  ", "message": "Body"})
        with self.assertRaises(ValidationError):
            create_announcement(self.staff, {"title": "Title", "message": ""})

    def test_end_must_follow_start(self):
        now = timezone.now()
        with self.assertRaises(ValidationError):
            create_announcement(self.staff, {
                "title": "Backwards",
                "message": "Body",
                "start_date": now,
                "end_date": now - timedelta(hours=1),
            })

    def test_deactivate_is_idempotent(self):
        banner = create_announcement(self.staff, {"title": "Maintenance", "message": "Saturday 2am"})

        self.assertTrue(deactivate_announcement(banner))
        self.assertFalse(deactivate_announcement(banner))
        self.assertFalse(get_active_announcements().exists())


class AnnouncementApiTest(TestCase):
    def setUp(self):
        self.staff = User.objects.create_user(username="staff", password="pass123", is_staff=True)
        self.user = User.objects.create_user(username="user", password="pass123")

        self.client_staff = APIClient()
        self.client_staff.force_authenticate(self.staff)
        self.client_user = APIClient()
        self.client_user.force_authenticate(self.user)

    def test_staff_publish_and_everyone_reads(self):
        resp = self.client_staff.post(
            "/api/announcements/",
            {"title": "Welcome", "message": "New partner search is live", "color": "green"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.data)
        banner_id = resp.data["id"]
        self.assertEqual(resp.data["created_by"], self.staff.pk)

        resp = APIClient().get("/api/announcements/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([b["title"] for b in resp.data], ["Welcome"])

        resp = self.client_staff.post(f"/api/announcements/{banner_id}/deactivate/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(resp.data["is_active"])

        resp = self.client_user.get("/api/announcements/")
        self.assertEqual(resp.data, [])

        resp = self.client_staff.get("/api/announcements/?all=true")
        self.assertEqual(len(resp.data), 1)

    def test_non_staff_cannot_publish(self):
        resp = self.client_user.post(
            "/api/announcements/", {"title": "Spam", "message": "Buy now"}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(AnnouncementBanner.objects.exists())
