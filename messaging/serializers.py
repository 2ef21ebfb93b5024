from rest_framework import serializers

from users.serializers import PublicProfileSerializer
from .models import Message


class MessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = Message
        fields = ['id', 'sender', 'recipient', 'content', 'read', 'created_at']
        read_only_fields = fields


class SendMessageSerializer(serializers.Serializer):
    recipient_id = serializers.UUIDField()
    content = serializers.CharField()


class ConversationSerializer(serializers.Serializer):
    user = PublicProfileSerializer()
    last_message = MessageSerializer()
    unread_count = serializers.IntegerField()
