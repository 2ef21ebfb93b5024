from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import JoinRequest, Organization, PartnershipInterest
from .serializers import (
    JoinRequestSerializer,
    OrganizationMemberSerializer,
    OrganizationSerializer,
    PartnershipInterestSerializer,
    ReviewJoinRequestSerializer,
)
from .services import (
    add_partnership_interest,
    can_manage,
    create_organization,
    delete_partnership_interest,
    get_organization_members,
    get_partnership_interests,
    get_user_organizations,
    remove_member,
    request_to_join,
    review_join_request,
)


UUID_PATTERN = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"


class OrganizationViewSet(viewsets.ModelViewSet):
    """
    Organizations API.
    - List / retrieve: any authenticated user
    - Create: any authenticated user (becomes owner + member)
    - Update / delete: owner or admins
    """
    queryset = Organization.objects.select_related("owner")
    serializer_class = OrganizationSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        queryset = super().get_queryset()
        user = self.request.user

        # organizations awaiting approval are only visible to their members and staff
        if not (user.is_superuser or user.is_staff):
            queryset = queryset.filter(
                Q(status=Organization.STATUS_ACTIVE) | Q(members__user=user)
            ).distinct()

        search = self.request.query_params.get("search")
        if search:
            queryset = queryset.filter(name__icontains=search)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        organization = create_organization(request.user, serializer.validated_data)
        return Response(self.get_serializer(organization).data, status=status.HTTP_201_CREATED)

    def perform_update(self, serializer):
        if not can_manage(serializer.instance, self.request.user):
            raise PermissionDenied("Only organization admins can edit this organization")
        serializer.save()

    def perform_destroy(self, instance):
        if instance.owner_id != self.request.user.pk and not self.request.user.is_superuser:
            raise PermissionDenied("Only the owner can delete this organization")
        instance.delete()

    @action(detail=False, methods=["get"])
    def me(self, request):
        """
        GET /api/organizations/me/
        Organizations the current user belongs to.
        """
        qs = get_user_organizations(request.user)
        return Response(self.get_serializer(qs, many=True).data)

    @action(detail=True, methods=["get"])
    def members(self, request, pk=None):
        organization = self.get_object()
        members = get_organization_members(organization)
        return Response(OrganizationMemberSerializer(members, many=True).data)

    @action(detail=True, methods=["delete"], url_path=rf"members/(?P<user_id>{UUID_PATTERN})")
    def delete_member(self, request, pk=None, user_id=None):
        organization = self.get_object()
        if not can_manage(organization, request.user) and str(request.user.pk) != user_id:
            raise PermissionDenied("Only organization admins can remove members")
        remove_member(organization, user_id, actor=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def join(self, request, pk=None):
        """
        POST /api/organizations/{id}/join/
        Body: {"message": "..."}
        """
        organization = self.get_object()
        join_request = request_to_join(organization, request.user, request.data.get("message", ""))
        return Response(JoinRequestSerializer(join_request).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"])
    def requests(self, request, pk=None):
        """
        GET /api/organizations/{id}/requests/?status=pending
        """
        organization = self.get_object()
        if not can_manage(organization, request.user):
            raise PermissionDenied("Only organization admins can view join requests")

        qs = organization.join_requests.select_related("user", "organization")
        status_param = request.query_params.get("status")
        if status_param:
            qs = qs.filter(status=status_param)
        return Response(JoinRequestSerializer(qs, many=True).data)

    @action(detail=True, methods=["get", "post"])
    def interests(self, request, pk=None):
        """
        GET  /api/organizations/{id}/interests/
        POST /api/organizations/{id}/interests/
        Body: {"partnership_type": "...", "description": "..."}
        """
        organization = self.get_object()
        if request.method == "GET":
            qs = get_partnership_interests(organization)
            return Response(PartnershipInterestSerializer(qs, many=True).data)

        serializer = PartnershipInterestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        interest = add_partnership_interest(
            organization,
            request.user,
            serializer.validated_data["partnership_type"],
            serializer.validated_data["description"],
        )
        return Response(PartnershipInterestSerializer(interest).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["delete"], url_path=rf"interests/(?P<interest_id>{UUID_PATTERN})")
    def delete_interest(self, request, pk=None, interest_id=None):
        organization = self.get_object()
        interest = get_object_or_404(PartnershipInterest, pk=interest_id, organization=organization)
        if not delete_partnership_interest(interest, request.user):
            raise PermissionDenied("Only organization admins can manage partnership interests")
        return Response(status=status.HTTP_204_NO_CONTENT)


class JoinRequestReviewView(APIView):
    """
    POST /api/organizations/requests/<request_id>/
    Body: {"action": "approve" | "reject"}
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, request_id):
        join_request = get_object_or_404(
            JoinRequest.objects.select_related("organization"),
            pk=request_id,
        )
        if not can_manage(join_request.organization, request.user):
            raise PermissionDenied("Only organization admins can review join requests")

        serializer = ReviewJoinRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        join_request = review_join_request(join_request, serializer.validated_data["action"], actor=request.user)
        return Response(JoinRequestSerializer(join_request).data)
