from rest_framework import serializers

from users.serializers import PublicProfileSerializer
from .models import FeedComment, FeedPost


class FeedCommentSerializer(serializers.ModelSerializer):
    user = PublicProfileSerializer(read_only=True)

    class Meta:
        model = FeedComment
        fields = ['id', 'post', 'user', 'content', 'created_at', 'updated_at']
        read_only_fields = ['post', 'user', 'created_at', 'updated_at']


class FeedPostSerializer(serializers.ModelSerializer):
    author = PublicProfileSerializer(read_only=True)
    organization_name = serializers.CharField(source='organization.name', read_only=True, default=None)
    likes_count = serializers.SerializerMethodField()
    liked_by_me = serializers.SerializerMethodField()
    comments = FeedCommentSerializer(many=True, read_only=True)
    tagged_organizations = serializers.PrimaryKeyRelatedField(many=True, read_only=True)

    class Meta:
        model = FeedPost
        fields = [
            'id',
            'author',
            'organization',
            'organization_name',
            'content',
            'location',
            'image_url',
            'tagged_organizations',
            'likes_count',
            'liked_by_me',
            'comments',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_likes_count(self, obj):
        annotated = getattr(obj, 'likes_count', None)
        if annotated is not None:
            return annotated
        return obj.likes.count()

    def get_liked_by_me(self, obj):
        request = self.context.get('request')
        if not request or not request.user.is_authenticated:
            return False
        return any(like.user_id == request.user.pk for like in obj.likes.all())


class CreatePostSerializer(serializers.Serializer):
    content = serializers.CharField()
    organization_id = serializers.UUIDField(required=False, allow_null=True)
    location = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    image_url = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    tagged_organization_ids = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        default=list,
    )


class CreateCommentSerializer(serializers.Serializer):
    content = serializers.CharField()
