# messaging/tests/test_messaging.py
from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from messaging.services import get_conversation, mark_conversation_read, send_message
from notifications.models import Notification

User = get_user_model()


class MessagingTest(TestCase):
    def setUp(self):
        self.alice = User.objects.create_user(username="alice", password="pass123", name="Alice")
        self.bob = User.objects.create_user(username="bob", password="pass123")

    def test_send_message_notifies_recipient(self):
        message = send_message(self.alice, self.bob.pk, "  Are you free Friday?  ")

        self.assertEqual(message.content, "Are you free Friday?")
        notification = Notification.objects.get(user=self.bob)
        self.assertEqual(notification.title, "New Message")
        self.assertIn("Alice", notification.message)

    def test_cannot_send_empty_or_to_self(self):
        with self.assertRaises(ValidationError):
            send_message(self.alice, self.bob.pk, "   ")
        with self.assertRaises(ValidationError):
            send_message(self.alice, self.alice.pk, "Hi me")

    def test_conversation_and_read_state(self):
        send_message(self.alice, self.bob.pk, "Hi Bob")
        send_message(self.bob, self.alice.pk, "Hi Alice")
        send_message(self.alice, self.bob.pk, "How are you?")

        conversation = list(get_conversation(self.bob, self.alice.pk))
        self.assertEqual([m.content for m in conversation], ["Hi Bob", "Hi Alice", "How are you?"])

        self.assertEqual(mark_conversation_read(self.bob, self.alice.pk), 2)
        self.assertEqual(mark_conversation_read(self.bob, self.alice.pk), 0)

    def test_conversations_api(self):
        client = APIClient()
        client.force_authenticate(self.bob)
        send_message(self.alice, self.bob.pk, "Ping")

        resp = client.get("/api/messages/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data), 1)
        self.assertEqual(resp.data[0]["unread_count"], 1)

        resp = client.post("/api/messages/", {"recipient_id": str(self.alice.pk), "content": "Pong"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.data)

        resp = client.post(f"/api/messages/{self.alice.pk}/read/")
        self.assertEqual(resp.data["marked_read"], 1)
