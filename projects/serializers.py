from rest_framework import serializers

from organizations.models import Organization, OrganizationMember
from users.serializers import PublicProfileSerializer
from .models import (
    PARTNERSHIP_TYPE_CHOICES,
    PendingReview,
    Project,
    ProjectApplication,
    ProjectPhase,
    Review,
)


class ProjectSerializer(serializers.ModelSerializer):
    organizer_name = serializers.CharField(source='organizer.display_name', read_only=True)
    organization_name = serializers.CharField(source='organization.name', read_only=True, default=None)
    organization = serializers.PrimaryKeyRelatedField(
        queryset=Organization.objects.all(),
        required=False,
        allow_null=True,
    )

    class Meta:
        model = Project
        fields = [
            'id',
            'organizer',
            'organizer_name',
            'organization',
            'organization_name',
            'title',
            'description',
            'status',
            'partnership_types',
            'applications_enabled',
            'category',
            'location',
            'required_skills',
            'image',
            'start_date',
            'end_date',
            'created_at',
            'updated_at',
            'completed_at',
        ]
        read_only_fields = ['organizer', 'status', 'created_at', 'updated_at', 'completed_at']

    def validate_partnership_types(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("Expected a list of partnership types.")
        allowed = dict(PARTNERSHIP_TYPE_CHOICES)
        unknown = [t for t in value if t not in allowed]
        if unknown:
            raise serializers.ValidationError(f"Unknown partnership types: {', '.join(map(str, unknown))}")
        # keep order, drop repeats
        return list(dict.fromkeys(value))

    def validate_organization(self, value):
        if value is None:
            return value
        user = self.context['request'].user
        if not OrganizationMember.objects.filter(organization=value, user=user).exists():
            raise serializers.ValidationError("You can only create projects for organizations you belong to.")
        return value

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": "End date must be on or after the start date."})
        return attrs

    def create(self, validated_data):
        validated_data['organizer'] = self.context['request'].user
        return super().create(validated_data)


class ApplySerializer(serializers.Serializer):
    partnership_type = serializers.ChoiceField(choices=PARTNERSHIP_TYPE_CHOICES)
    message = serializers.CharField(required=False, allow_blank=True, default="")
    organization_id = serializers.UUIDField(required=False, allow_null=True)


class ProjectApplicationSerializer(serializers.ModelSerializer):
    project_title = serializers.CharField(source='project.title', read_only=True)
    project_status = serializers.CharField(source='project.status', read_only=True)

    class Meta:
        model = ProjectApplication
        fields = [
            'id',
            'project',
            'project_title',
            'project_status',
            'user',
            'organization',
            'partnership_type',
            'status',
            'message',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ApplicationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        ProjectApplication.STATUS_APPROVED,
        ProjectApplication.STATUS_REJECTED,
    ])


class ProjectStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Project.STATUS_CHOICES)


class PhaseSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProjectPhase
        fields = [
            'id',
            'project',
            'title',
            'description',
            'status',
            'due_date',
            'completed_date',
            'order',
            'template_key',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'project', 'template_key', 'created_at', 'updated_at']


class PhaseCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    status = serializers.ChoiceField(
        choices=ProjectPhase.STATUS_CHOICES,
        required=False,
        default=ProjectPhase.STATUS_NOT_STARTED,
    )
    due_date = serializers.DateField(required=False, allow_null=True)
    order = serializers.IntegerField(required=False, allow_null=True, min_value=0)


class PhaseUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(required=False, max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=ProjectPhase.STATUS_CHOICES, required=False)
    due_date = serializers.DateField(required=False, allow_null=True)
    completed_date = serializers.DateField(required=False, allow_null=True)
    order = serializers.IntegerField(required=False, min_value=0)


class ReviewSerializer(serializers.ModelSerializer):
    reviewer = PublicProfileSerializer(read_only=True)
    reviewee = PublicProfileSerializer(read_only=True)
    project_title = serializers.CharField(source='project.title', read_only=True)

    class Meta:
        model = Review
        fields = [
            'id',
            'project',
            'project_title',
            'reviewer',
            'reviewee',
            'rating',
            'comment',
            'is_organizer_review',
            'created_at',
        ]
        read_only_fields = fields


class CreateReviewSerializer(serializers.Serializer):
    reviewee_id = serializers.UUIDField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, default="")


class SubmitPendingReviewSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, default="")


class PendingReviewSerializer(serializers.ModelSerializer):
    reviewee = PublicProfileSerializer(read_only=True)

    class Meta:
        model = PendingReview
        fields = [
            'id',
            'project',
            'reviewee',
            'is_organizer_review',
            'status',
            'position',
            'created_at',
        ]
        read_only_fields = fields
