from rest_framework import serializers

from organizations.serializers import OrganizationSerializer
from projects.serializers import ProjectSerializer


class ApprovalActionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=["approve", "reject"])


class PendingApprovalsSerializer(serializers.Serializer):
    organizations = OrganizationSerializer(many=True, read_only=True)
    projects = ProjectSerializer(many=True, read_only=True)
