# feed/tests/test_feed.py
from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from feed.models import FeedLike
from feed.services import add_comment, create_post, get_feed_posts, toggle_like
from organizations.services import create_organization

User = get_user_model()


class FeedServiceTest(TestCase):
    def setUp(self):
        self.author = User.objects.create_user(username="author", password="pass123")
        self.reader = User.objects.create_user(username="reader", password="pass123")
        self.organization = create_organization(self.author, {"name": "Tree Planters"})

    def test_content_is_trimmed_and_required(self):
        post = create_post(self.author, "  Planted 50 trees today!  ")
        self.assertEqual(post.content, "Planted 50 trees today!")

        with self.assertRaises(ValidationError):
            create_post(self.author, "   ")

    def test_post_on_behalf_requires_membership(self):
        with self.assertRaises(ValidationError):
            create_post(self.reader, "Hello", organization_id=self.organization.pk)

        post = create_post(self.author, "Hello", organization_id=self.organization.pk)
        self.assertEqual(post.organization_id, self.organization.pk)

    def test_tagging_organizations(self):
        post = create_post(self.reader, "Thanks!", tagged_organization_ids=[self.organization.pk])
        self.assertEqual(list(post.tagged_organizations.all()), [self.organization])

    def test_like_then_unlike_restores_count(self):
        post = create_post(self.author, "Like me")
        FeedLike.objects.create(post=post, user=self.author)
        before = FeedLike.objects.filter(post=post).count()

        liked, count = toggle_like(post, self.reader)
        self.assertTrue(liked)
        self.assertEqual(count, before + 1)

        liked, count = toggle_like(post, self.reader)
        self.assertFalse(liked)
        self.assertEqual(count, before)

    def test_comment_requires_content(self):
        post = create_post(self.author, "Comment on me")

        comment = add_comment(post, self.reader, "  Nice!  ")
        self.assertEqual(comment.content, "Nice!")

        with self.assertRaises(ValidationError):
            add_comment(post, self.reader, "")

    def test_following_filter(self):
        org_post = create_post(self.author, "From the org", organization_id=self.organization.pk)
        create_post(self.reader, "Personal post")

        self.assertEqual(get_feed_posts(self.reader, "all").count(), 2)
        self.assertEqual(list(get_feed_posts(self.reader, "following")), [])
        self.assertEqual([p.pk for p in get_feed_posts(self.author, "following")], [org_post.pk])

        with self.assertRaises(ValidationError):
            get_feed_posts(self.reader, "trending")


class FeedApiTest(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="poster", password="pass123")
        self.client = APIClient()
        self.client.force_authenticate(self.user)

    def test_post_like_and_comment(self):
        resp = self.client.post("/api/feed/", {"content": "First post"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.data)
        post_id = resp.data["id"]

        resp = self.client.post(f"/api/feed/{post_id}/like/")
        self.assertEqual(resp.data, {"liked": True, "likes_count": 1})

        resp = self.client.post(f"/api/feed/{post_id}/comments/", {"content": "Self reply"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)

        resp = self.client.get("/api/feed/")
        self.assertEqual(resp.data["count"], 1)
        post = resp.data["results"][0]
        self.assertEqual(post["likes_count"], 1)
        self.assertTrue(post["liked_by_me"])
        self.assertEqual(len(post["comments"]), 1)

        resp = self.client.post(f"/api/feed/{post_id}/like/")
        self.assertEqual(resp.data, {"liked": False, "likes_count": 0})
