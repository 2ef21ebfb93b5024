from rest_framework import serializers

from users.serializers import PublicProfileSerializer
from .models import JoinRequest, Organization, OrganizationMember, PartnershipInterest


class OrganizationSerializer(serializers.ModelSerializer):
    owner = PublicProfileSerializer(read_only=True)
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = Organization
        fields = [
            'id',
            'name',
            'description',
            'industry',
            'location',
            'website',
            'logo',
            'size',
            'founded_year',
            'status',
            'owner',
            'member_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['status', 'owner', 'created_at', 'updated_at']

    def get_member_count(self, obj):
        return obj.members.count()


class OrganizationMemberSerializer(serializers.ModelSerializer):
    user = PublicProfileSerializer(read_only=True)

    class Meta:
        model = OrganizationMember
        fields = ['id', 'user', 'role', 'created_at']
        read_only_fields = fields


class JoinRequestSerializer(serializers.ModelSerializer):
    user = PublicProfileSerializer(read_only=True)
    organization_name = serializers.CharField(source='organization.name', read_only=True)

    class Meta:
        model = JoinRequest
        fields = ['id', 'organization', 'organization_name', 'user', 'message', 'status', 'created_at']
        read_only_fields = ['organization', 'user', 'status', 'created_at']


class ReviewJoinRequestSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=["approve", "reject"])


class PartnershipInterestSerializer(serializers.ModelSerializer):
    class Meta:
        model = PartnershipInterest
        fields = ['id', 'organization', 'partnership_type', 'description', 'created_at', 'updated_at']
        read_only_fields = ['organization', 'created_at', 'updated_at']
