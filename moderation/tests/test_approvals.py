# moderation/tests/test_approvals.py
from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.test import APIClient

from core.exceptions import InvalidStatusTransition
from moderation.services import review_organization, review_project_publication
from notifications.models import Notification
from organizations.models import Organization
from organizations.services import create_organization, request_to_join
from projects.models import Project
from projects.services import apply_to_project, change_project_status

User = get_user_model()


@override_settings(AUTO_APPROVE_ORGANIZATIONS=False, AUTO_APPROVE_PROJECTS=False)
class ApprovalWorkflowTest(TestCase):
    def setUp(self):
        self.staff = User.objects.create_user(username="staff", password="pass123", is_staff=True)
        self.owner = User.objects.create_user(username="owner", password="pass123")
        self.partner = User.objects.create_user(username="partner", password="pass123")

        self.organization = create_organization(self.owner, {"name": "Harbor Trust"})
        self.project = Project.objects.create(
            organizer=self.owner,
            title="Harbor Cleanup",
            description="",
            partnership_types=["skilled"],
        )

    def test_new_organization_waits_for_approval(self):
        self.assertEqual(self.organization.status, Organization.STATUS_PENDING_APPROVAL)

        with self.assertRaises(ValidationError):
            request_to_join(self.organization, self.partner)

    def test_approving_organization_activates_and_notifies_owner(self):
        organization = review_organization(self.organization, "approve", actor=self.staff)

        self.assertEqual(organization.status, Organization.STATUS_ACTIVE)
        notification = Notification.objects.get(user=self.owner)
        self.assertEqual(notification.title, "Organization Approved")
        self.assertEqual(notification.link, f"/organizations/{organization.pk}")

        with self.assertRaises(InvalidStatusTransition):
            review_organization(organization, "reject", actor=self.staff)

    def test_rejecting_organization_notifies_owner(self):
        organization = review_organization(self.organization, "reject", actor=self.staff)

        self.assertEqual(organization.status, Organization.STATUS_REJECTED)
        self.assertTrue(Notification.objects.filter(user=self.owner, title="Organization Rejected").exists())

    def test_unknown_action_is_rejected(self):
        with self.assertRaises(ValidationError):
            review_organization(self.organization, "maybe", actor=self.staff)

    def test_publishing_goes_through_review(self):
        change_project_status(self.project, Project.STATUS_PUBLISHED, actor=self.owner)
        self.project.refresh_from_db()
        self.assertEqual(self.project.status, Project.STATUS_PENDING_PUBLISH)

        # still hidden, so nobody can apply yet
        with self.assertRaises(NotFound):
            apply_to_project(self.project.pk, self.partner.pk, "skilled")

        with self.assertRaises(PermissionDenied):
            change_project_status(self.project, Project.STATUS_PUBLISHED, actor=self.owner)

        project = review_project_publication(self.project, "approve", actor=self.staff)
        self.assertEqual(project.status, Project.STATUS_PUBLISHED)
        self.assertTrue(Notification.objects.filter(user=self.owner, title="Project Published").exists())

        application = apply_to_project(self.project.pk, self.partner.pk, "skilled")
        self.assertIsNotNone(application)

    def test_rejected_publication_returns_to_draft(self):
        change_project_status(self.project, Project.STATUS_PUBLISHED, actor=self.owner)

        project = review_project_publication(self.project, "reject", actor=self.staff)

        self.assertEqual(project.status, Project.STATUS_DRAFT)
        notification = Notification.objects.get(user=self.owner, title="Project Publication Rejected")
        self.assertTrue(notification.link.endswith("/edit"))

    def test_only_pending_projects_can_be_reviewed(self):
        with self.assertRaises(InvalidStatusTransition):
            review_project_publication(self.project, "approve", actor=self.staff)

    def test_staff_publish_directly(self):
        change_project_status(self.project, Project.STATUS_PUBLISHED, actor=self.staff)
        self.project.refresh_from_db()
        self.assertEqual(self.project.status, Project.STATUS_PUBLISHED)


@override_settings(AUTO_APPROVE_ORGANIZATIONS=False, AUTO_APPROVE_PROJECTS=False)
class ApprovalApiTest(TestCase):
    def setUp(self):
        self.staff = User.objects.create_user(username="staff", password="pass123", is_staff=True)
        self.owner = User.objects.create_user(username="owner", password="pass123")

        self.client_staff = APIClient()
        self.client_staff.force_authenticate(self.staff)
        self.client_owner = APIClient()
        self.client_owner.force_authenticate(self.owner)

        self.organization = create_organization(self.owner, {"name": "Harbor Trust"})
        self.project = Project.objects.create(organizer=self.owner, title="Harbor Cleanup", description="")
        change_project_status(self.project, Project.STATUS_PUBLISHED, actor=self.owner)

    def test_queue_lists_pending_items(self):
        resp = self.client_staff.get("/api/admin/approvals/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([o["name"] for o in resp.data["organizations"]], ["Harbor Trust"])
        self.assertEqual([p["title"] for p in resp.data["projects"]], ["Harbor Cleanup"])

    def test_non_staff_are_forbidden(self):
        resp = self.client_owner.get("/api/admin/approvals/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        resp = self.client_owner.post(
            f"/api/admin/approvals/organizations/{self.organization.pk}/", {"action": "approve"}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_staff_decisions(self):
        resp = self.client_staff.post(
            f"/api/admin/approvals/organizations/{self.organization.pk}/", {"action": "approve"}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.data)
        self.assertEqual(resp.data["status"], Organization.STATUS_ACTIVE)

        resp = self.client_staff.post(
            f"/api/admin/approvals/projects/{self.project.pk}/", {"action": "approve"}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.data)
        self.assertEqual(resp.data["status"], Project.STATUS_PUBLISHED)

        resp = self.client_staff.post(
            f"/api/admin/approvals/projects/{self.project.pk}/", {"action": "approve"}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

    def test_pending_organization_hidden_from_outsiders(self):
        outsider = User.objects.create_user(username="outsider", password="pass123")
        client = APIClient()
        client.force_authenticate(outsider)

        resp = client.get(f"/api/organizations/{self.organization.pk}/")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

        resp = self.client_owner.get(f"/api/organizations/{self.organization.pk}/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
