# projects/tests/test_api.py
from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from projects.models import Project, ProjectApplication, ProjectPhase

User = get_user_model()


class ProjectApiTest(TestCase):
    def setUp(self):
        self.organizer = User.objects.create_user(username="org", password="pass123", role="organizer")
        self.partner = User.objects.create_user(username="partner", password="pass123", role="partner")
        self.stranger = User.objects.create_user(username="stranger", password="pass123")

        self.client_org = APIClient()
        self.client_org.force_authenticate(self.organizer)
        self.client_partner = APIClient()
        self.client_partner.force_authenticate(self.partner)
        self.client_stranger = APIClient()
        self.client_stranger.force_authenticate(self.stranger)

    def create_project(self, **extra):
        payload = {
            "title": "Park Restoration",
            "description": "Restore the city park",
            "partnership_types": ["skilled", "monetary"],
        }
        payload.update(extra)
        resp = self.client_org.post("/api/projects/", payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.data)
        return resp.data

    def test_create_project_starts_as_draft(self):
        data = self.create_project()
        self.assertEqual(data["status"], Project.STATUS_DRAFT)
        self.assertEqual(str(data["organizer"]), str(self.organizer.pk))

    def test_unknown_partnership_type_is_rejected(self):
        resp = self.client_org.post(
            "/api/projects/",
            {"title": "X", "description": "Y", "partnership_types": ["barter"]},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(resp.json()["success"])

    def test_drafts_are_hidden_from_others(self):
        data = self.create_project()

        resp = self.client_partner.get(f"/api/projects/{data['id']}/")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

        self.client_org.post(f"/api/projects/{data['id']}/status/", {"status": "published"}, format="json")
        resp = self.client_partner.get(f"/api/projects/{data['id']}/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

    def test_only_organizer_can_edit(self):
        data = self.create_project()
        self.client_org.post(f"/api/projects/{data['id']}/status/", {"status": "published"}, format="json")

        resp = self.client_partner.patch(f"/api/projects/{data['id']}/", {"title": "Hijacked"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_invalid_status_change_returns_conflict(self):
        data = self.create_project()
        resp = self.client_org.post(f"/api/projects/{data['id']}/status/", {"status": "completed"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

    def test_apply_approve_and_track_phases(self):
        data = self.create_project()
        project_id = data["id"]
        self.client_org.post(f"/api/projects/{project_id}/status/", {"status": "published"}, format="json")

        # Partner applies
        resp = self.client_partner.post(
            f"/api/projects/{project_id}/apply/",
            {"partnership_type": "skilled", "message": "Count me in"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.data)
        application_id = resp.data["id"]

        resp = self.client_partner.get(f"/api/projects/{project_id}/apply/")
        self.assertEqual(resp.data["application"]["status"], "pending")

        # Only the organizer sees the applications list
        resp = self.client_partner.get(f"/api/projects/{project_id}/applications/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        resp = self.client_org.get(f"/api/projects/{project_id}/applications/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data), 1)

        # Organizer approves
        resp = self.client_org.patch(
            f"/api/projects/applications/{application_id}/",
            {"status": "approved"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.data)
        self.assertEqual(resp.data["status"], ProjectApplication.STATUS_APPROVED)

        resp = self.client_partner.get(f"/api/projects/{project_id}/phases/")
        self.assertEqual(len(resp.data), 4)

        # Approved partner moves a phase forward
        phase_id = resp.data[0]["id"]
        resp = self.client_partner.patch(
            f"/api/projects/{project_id}/phases/{phase_id}/",
            {"status": "in-progress"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.data)

        # ...but cannot delete it
        resp = self.client_partner.delete(f"/api/projects/{project_id}/phases/{phase_id}/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        resp = self.client_org.delete(f"/api/projects/{project_id}/phases/{phase_id}/")
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(ProjectPhase.objects.filter(project_id=project_id).count(), 3)

    def test_strangers_cannot_add_phases(self):
        data = self.create_project()
        self.client_org.post(f"/api/projects/{data['id']}/status/", {"status": "published"}, format="json")

        resp = self.client_stranger.post(f"/api/projects/{data['id']}/phases/", {"title": "Mine"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        resp = self.client_org.post(f"/api/projects/{data['id']}/phases/", {"title": "Kickoff"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.data)
        self.assertEqual(resp.data["order"], 0)

    def test_complete_then_review_flow(self):
        data = self.create_project()
        project_id = data["id"]
        self.client_org.post(f"/api/projects/{project_id}/status/", {"status": "published"}, format="json")
        resp = self.client_partner.post(
            f"/api/projects/{project_id}/apply/", {"partnership_type": "monetary"}, format="json",
        )
        self.client_org.patch(f"/api/projects/applications/{resp.data['id']}/", {"status": "approved"}, format="json")

        resp = self.client_org.post(f"/api/projects/{project_id}/complete/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["status"], "completed")
        self.assertIsNotNone(resp.data["completed_at"])

        # Applying after completion is refused
        resp = self.client_stranger.post(
            f"/api/projects/{project_id}/apply/", {"partnership_type": "skilled"}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        # Organizer works through their review queue
        resp = self.client_org.get(f"/api/projects/{project_id}/reviews/next/")
        self.assertEqual(resp.data["progress"]["remaining"], 1)
        pending_id = resp.data["pending"]["id"]

        resp = self.client_org.post(
            f"/api/projects/{project_id}/reviews/pending/{pending_id}/submit/",
            {"rating": 5, "comment": "Reliable partner"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.data)

        resp = self.client_org.get(f"/api/projects/{project_id}/reviews/next/")
        self.assertIsNone(resp.data["pending"])

        # Partner reviews the organizer directly
        resp = self.client_partner.post(
            f"/api/projects/{project_id}/reviews/",
            {"reviewee_id": str(self.organizer.pk), "rating": 4},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.data)

        resp = self.client_partner.post(
            f"/api/projects/{project_id}/reviews/",
            {"reviewee_id": str(self.organizer.pk), "rating": 2},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

        resp = self.client_stranger.get(f"/api/users/{self.organizer.pk}/reviews/")
        self.assertEqual(resp.data["count"], 1)
        self.assertEqual(resp.data["average_rating"], 4)

    def test_my_applications(self):
        data = self.create_project()
        self.client_org.post(f"/api/projects/{data['id']}/status/", {"status": "published"}, format="json")
        self.client_partner.post(f"/api/projects/{data['id']}/apply/", {"partnership_type": "skilled"}, format="json")

        resp = self.client_partner.get("/api/projects/me/applications/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data), 1)
        self.assertEqual(resp.data[0]["project_title"], "Park Restoration")

    def test_filter_by_organization(self):
        resp = self.client_org.post("/api/organizations/", {"name": "Green Org"}, format="json")
        organization_id = resp.data["id"]
        self.create_project(organization=organization_id)
        self.create_project(title="Unaffiliated")

        resp = self.client_org.get(f"/api/projects/?organization={organization_id}")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([p["title"] for p in resp.data], ["Park Restoration"])

        resp = self.client_org.get("/api/projects/?organization=bogus")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("organization", resp.json()["errors"])

    def test_repeat_apply_returns_existing_with_ok(self):
        data = self.create_project()
        self.client_org.post(f"/api/projects/{data['id']}/status/", {"status": "published"}, format="json")

        first = self.client_partner.post(f"/api/projects/{data['id']}/apply/", {"partnership_type": "skilled"}, format="json")
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)

        second = self.client_partner.post(f"/api/projects/{data['id']}/apply/", {"partnership_type": "skilled"}, format="json")
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(second.data["id"], first.data["id"])

    def test_cannot_apply_to_draft(self):
        data = self.create_project()

        resp = self.client_partner.post(f"/api/projects/{data['id']}/apply/", {"partnership_type": "skilled"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(ProjectApplication.objects.filter(project_id=data["id"]).exists())
