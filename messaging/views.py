from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import ConversationSerializer, MessageSerializer, SendMessageSerializer
from .services import get_conversation, get_conversations, mark_conversation_read, send_message


class ConversationListView(APIView):
    """
    GET  /api/messages/            -> my conversations
    POST /api/messages/            -> send a message
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        conversations = get_conversations(request.user)
        return Response(ConversationSerializer(conversations, many=True).data)

    def post(self, request):
        serializer = SendMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        message = send_message(
            request.user,
            serializer.validated_data["recipient_id"],
            serializer.validated_data["content"],
        )
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


class ConversationDetailView(APIView):
    """
    GET /api/messages/<user_id>/  -> messages with that user, oldest first
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, user_id):
        qs = get_conversation(request.user, user_id)
        return Response(MessageSerializer(qs, many=True).data)


class ConversationReadView(APIView):
    """
    POST /api/messages/<user_id>/read/
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, user_id):
        updated = mark_conversation_read(request.user, user_id)
        return Response({"marked_read": updated})
