from django.contrib.auth import get_user_model
from django.test import TestCase

from core.exceptions import InvalidStatusTransition
from projects import state_machine
from projects.models import Project, ProjectApplication

User = get_user_model()


class ProjectStateMachineTest(TestCase):
    def setUp(self):
        self.organizer = User.objects.create_user(username="org", password="pass123")
        self.project = Project.objects.create(organizer=self.organizer, title="P", description="")

    def test_draft_can_only_be_published_or_submitted(self):
        self.assertEqual(
            state_machine.get_allowed_transitions(self.project),
            [Project.STATUS_PUBLISHED, Project.STATUS_PENDING_PUBLISH],
        )

        can, reason = state_machine.can_transition(self.project, Project.STATUS_COMPLETED)
        self.assertFalse(can)
        self.assertIn("draft", reason)

    def test_unknown_status_is_rejected(self):
        can, reason = state_machine.can_transition(self.project, "archived")
        self.assertFalse(can)
        self.assertEqual(reason, "Invalid status: archived")

    def test_transition_saves_and_reports_change(self):
        self.assertTrue(state_machine.transition(self.project, Project.STATUS_PUBLISHED))
        self.project.refresh_from_db()
        self.assertEqual(self.project.status, Project.STATUS_PUBLISHED)

        self.assertFalse(state_machine.transition(self.project, Project.STATUS_PUBLISHED))

    def test_completed_is_terminal(self):
        self.project.status = Project.STATUS_COMPLETED
        self.assertTrue(state_machine.is_terminal_status(self.project))

        with self.assertRaises(InvalidStatusTransition):
            state_machine.transition(self.project, Project.STATUS_IN_PROGRESS)


class ApplicationStateMachineTest(TestCase):
    def test_pending_moves_to_either_outcome_once(self):
        organizer = User.objects.create_user(username="org", password="pass123")
        partner = User.objects.create_user(username="partner", password="pass123")
        project = Project.objects.create(organizer=organizer, title="P", description="")
        application = ProjectApplication.objects.create(
            project=project, user=partner, partnership_type="skilled",
        )

        self.assertFalse(state_machine.is_terminal_status(application))
        state_machine.transition(application, ProjectApplication.STATUS_APPROVED)
        self.assertTrue(state_machine.is_terminal_status(application))

        with self.assertRaises(InvalidStatusTransition):
            state_machine.transition(application, ProjectApplication.STATUS_PENDING)
