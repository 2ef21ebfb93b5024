import logging

from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import PendingReview, Project, ProjectApplication, ProjectPhase
from .policies import ProjectPolicy
from .serializers import (
    ApplicationStatusSerializer,
    ApplySerializer,
    CreateReviewSerializer,
    PendingReviewSerializer,
    PhaseCreateSerializer,
    PhaseSerializer,
    PhaseUpdateSerializer,
    ProjectApplicationSerializer,
    ProjectSerializer,
    ProjectStatusSerializer,
    ReviewSerializer,
    SubmitPendingReviewSerializer,
)
from .services import (
    add_phase,
    apply_to_project,
    change_project_status,
    check_application_status,
    complete_project,
    delete_phase,
    get_next_pending_review,
    get_project_applications,
    get_project_phases,
    get_project_reviews,
    get_review_progress,
    get_user_applications,
    skip_review,
    submit_pending_review,
    submit_review,
    update_application_status,
    update_phase,
)
from .services.applications import parse_uuid

logger = logging.getLogger("collabdoor.api")


def get_visible_project(user, project_id):
    project = get_object_or_404(Project.objects.select_related("organizer", "organization"), pk=project_id)
    if not ProjectPolicy.can_view_project(user, project):
        raise NotFound("Project not found")
    return project


def require(allowed_reason):
    allowed, reason = allowed_reason
    if not allowed:
        raise PermissionDenied(reason)


class ProjectViewSet(viewsets.ModelViewSet):
    """
    Projects API.
    - List / retrieve: drafts are only visible to their organizer
    - Create: any authenticated user (becomes the organizer)
    - Update / delete: organizer only
    """
    queryset = Project.objects.select_related("organizer", "organization")
    serializer_class = ProjectSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        queryset = super().get_queryset()
        user = self.request.user

        if not (user.is_superuser or user.is_staff):
            queryset = queryset.filter(~Q(status__in=Project.HIDDEN_STATUSES) | Q(organizer=user))

        params = self.request.query_params
        status_param = params.get("status")
        if status_param:
            queryset = queryset.filter(status=status_param)

        organization_param = params.get("organization")
        if organization_param:
            organization_id = parse_uuid(organization_param)
            if organization_id is None:
                raise ValidationError({"organization": "Invalid id."})
            queryset = queryset.filter(organization_id=organization_id)

        mine = params.get("mine")
        if mine and mine.lower() in ("1", "true", "yes"):
            queryset = queryset.filter(organizer=user)

        search = params.get("search")
        if search:
            queryset = queryset.filter(Q(title__icontains=search) | Q(description__icontains=search))

        return queryset.order_by("-created_at")

    def perform_update(self, serializer):
        require(ProjectPolicy.can_edit_project(self.request.user, serializer.instance))
        serializer.save()

    def perform_destroy(self, instance):
        require(ProjectPolicy.can_edit_project(self.request.user, instance))
        logger.info(f"Project deleted: id={instance.pk}, actor={self.request.user.pk}")
        instance.delete()

    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        """
        POST /api/projects/{id}/status/
        Body: {"status": "published" | "in-progress" | "completed" | "draft"}
        """
        project = self.get_object()
        require(ProjectPolicy.can_edit_project(request.user, project))

        serializer = ProjectStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        project = change_project_status(project, serializer.validated_data["status"], actor=request.user)
        return Response(ProjectSerializer(project, context={"request": request}).data)

    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):
        """
        POST /api/projects/{id}/complete/
        """
        project = self.get_object()
        require(ProjectPolicy.can_edit_project(request.user, project))

        project = complete_project(project, actor=request.user)
        return Response(ProjectSerializer(project, context={"request": request}).data)


# ─────────────────────────────────────────────────────────────
# Applications
# ─────────────────────────────────────────────────────────────

class ApplyToProjectView(APIView):
    """
    GET  /api/projects/<project_id>/apply/  -> my application (or null)
    POST /api/projects/<project_id>/apply/
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, project_id):
        application = check_application_status(project_id, request.user.pk)
        if application is None:
            return Response({"application": None})
        return Response({"application": ProjectApplicationSerializer(application).data})

    def post(self, request, project_id):
        serializer = ApplySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        already_applied = check_application_status(project_id, request.user.pk) is not None
        application = apply_to_project(
            project_id,
            request.user.pk,
            data["partnership_type"],
            message=data.get("message", ""),
            organization_id=data.get("organization_id"),
        )
        if application is None:
            raise NotFound("Project not found")

        response_status = status.HTTP_200_OK if already_applied else status.HTTP_201_CREATED
        return Response(ProjectApplicationSerializer(application).data, status=response_status)


class ProjectApplicationsView(APIView):
    """
    GET /api/projects/<project_id>/applications/  (organizer only)
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, project_id):
        project = get_visible_project(request.user, project_id)
        require(ProjectPolicy.can_review_applications(request.user, project))

        applications = get_project_applications(project.pk)
        status_param = request.query_params.get("status")
        if status_param:
            applications = [a for a in applications if a["status"] == status_param]
        return Response(applications)


class ApplicationStatusView(APIView):
    """
    PATCH /api/projects/applications/<application_id>/
    Body: {"status": "approved" | "rejected"}
    """
    permission_classes = [permissions.IsAuthenticated]

    def patch(self, request, application_id):
        application = get_object_or_404(
            ProjectApplication.objects.select_related("project"),
            pk=application_id,
        )
        require(ProjectPolicy.can_review_applications(request.user, application.project))

        serializer = ApplicationStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        application = update_application_status(
            application.pk,
            serializer.validated_data["status"],
            actor=request.user,
        )
        return Response(ProjectApplicationSerializer(application).data)


class MyApplicationsView(APIView):
    """
    GET /api/projects/me/applications/
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        qs = get_user_applications(request.user)
        return Response(ProjectApplicationSerializer(qs, many=True).data)


# ─────────────────────────────────────────────────────────────
# Phases
# ─────────────────────────────────────────────────────────────

class ProjectPhaseListCreateView(APIView):
    """
    GET  /api/projects/<project_id>/phases/
    POST /api/projects/<project_id>/phases/
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, project_id):
        project = get_visible_project(request.user, project_id)
        return Response(get_project_phases(project.pk))

    def post(self, request, project_id):
        project = get_visible_project(request.user, project_id)
        require(ProjectPolicy.can_edit_phases(request.user, project))

        serializer = PhaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        phase = add_phase(
            project,
            data["title"],
            description=data.get("description", ""),
            status=data.get("status", ProjectPhase.STATUS_NOT_STARTED),
            due_date=data.get("due_date"),
            order=data.get("order"),
            actor=request.user,
        )
        return Response(PhaseSerializer(phase).data, status=status.HTTP_201_CREATED)


class ProjectPhaseDetailView(APIView):
    """
    PATCH  /api/projects/<project_id>/phases/<phase_id>/
    DELETE /api/projects/<project_id>/phases/<phase_id>/
    """
    permission_classes = [permissions.IsAuthenticated]

    def get_phase(self, project_id, phase_id):
        return get_object_or_404(
            ProjectPhase.objects.select_related("project"),
            pk=phase_id,
            project_id=project_id,
        )

    def patch(self, request, project_id, phase_id):
        phase = self.get_phase(project_id, phase_id)
        require(ProjectPolicy.can_edit_phases(request.user, phase.project))

        serializer = PhaseUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        phase = update_phase(phase, serializer.validated_data, actor=request.user)
        return Response(PhaseSerializer(phase).data)

    def delete(self, request, project_id, phase_id):
        phase = self.get_phase(project_id, phase_id)
        require(ProjectPolicy.can_delete_phases(request.user, phase.project))

        delete_phase(phase, actor=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ─────────────────────────────────────────────────────────────
# Reviews
# ─────────────────────────────────────────────────────────────

class ProjectReviewsView(APIView):
    """
    GET  /api/projects/<project_id>/reviews/
    POST /api/projects/<project_id>/reviews/
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, project_id):
        project = get_visible_project(request.user, project_id)
        return Response(ReviewSerializer(get_project_reviews(project.pk), many=True).data)

    def post(self, request, project_id):
        project = get_visible_project(request.user, project_id)

        serializer = CreateReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        review = submit_review(
            project,
            request.user,
            data["reviewee_id"],
            data["rating"],
            data.get("comment", ""),
        )
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)


class NextPendingReviewView(APIView):
    """
    GET /api/projects/<project_id>/reviews/next/
    The caller's next review to write, plus worklist progress.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, project_id):
        project = get_visible_project(request.user, project_id)
        pending = get_next_pending_review(project, request.user)
        return Response({
            "pending": PendingReviewSerializer(pending).data if pending else None,
            "progress": get_review_progress(project, request.user),
        })


class PendingReviewActionView(APIView):
    """
    POST /api/projects/<project_id>/reviews/pending/<pending_id>/submit/
    POST /api/projects/<project_id>/reviews/pending/<pending_id>/skip/
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, project_id, pending_id, action):
        pending = get_object_or_404(
            PendingReview.objects.select_related("project", "reviewer"),
            pk=pending_id,
            project_id=project_id,
            reviewer=request.user,
        )

        if action == "skip":
            skip_review(pending)
            return Response(PendingReviewSerializer(pending).data)

        if action == "submit":
            serializer = SubmitPendingReviewSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            review = submit_pending_review(
                pending,
                serializer.validated_data["rating"],
                serializer.validated_data.get("comment", ""),
            )
            return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)

        raise NotFound("Unknown action")
