from django.shortcuts import get_object_or_404
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from organizations.models import Organization
from organizations.serializers import OrganizationSerializer
from projects.models import Project
from projects.serializers import ProjectSerializer
from .serializers import ApprovalActionSerializer, PendingApprovalsSerializer
from .services import (
    get_pending_organizations,
    get_pending_projects,
    review_organization,
    review_project_publication,
)


class PendingApprovalsView(APIView):
    """
    GET /api/admin/approvals/  -> organizations and projects waiting for staff
    """
    permission_classes = [IsAdminUser]

    def get(self, request):
        serializer = PendingApprovalsSerializer({
            "organizations": get_pending_organizations(),
            "projects": get_pending_projects(),
        })
        return Response(serializer.data)


class OrganizationApprovalView(APIView):
    """
    POST /api/admin/approvals/organizations/<organization_id>/
    Body: {"action": "approve" | "reject"}
    """
    permission_classes = [IsAdminUser]

    def post(self, request, organization_id):
        organization = get_object_or_404(Organization, pk=organization_id)

        serializer = ApprovalActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        organization = review_organization(organization, serializer.validated_data["action"], actor=request.user)
        return Response(OrganizationSerializer(organization).data)


class ProjectApprovalView(APIView):
    """
    POST /api/admin/approvals/projects/<project_id>/
    Body: {"action": "approve" | "reject"}
    """
    permission_classes = [IsAdminUser]

    def post(self, request, project_id):
        project = get_object_or_404(Project, pk=project_id)

        serializer = ApprovalActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        project = review_project_publication(project, serializer.validated_data["action"], actor=request.user)
        return Response(ProjectSerializer(project, context={"request": request}).data)
