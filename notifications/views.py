from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import status

from .serializers import MarkReadSerializer, NotificationSerializer
from .services import get_user_notifications, mark_all_as_read, mark_as_read


class MyNotificationsView(APIView):
    """
    GET /api/notifications/
    GET /api/notifications/?unread=true
    POST /api/notifications/  (mark read)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        unread_only = request.query_params.get("unread", "")
        qs = get_user_notifications(
            request.user,
            unread_only=unread_only.lower() in ("1", "true", "yes"),
        )

        serializer = NotificationSerializer(qs, many=True)
        return Response({
            "unread_count": get_user_notifications(request.user, unread_only=True).count(),
            "notifications": serializer.data,
        })

    def post(self, request):
        """
        Mark notifications as read.

        Body:
        {
          "ids": ["<uuid>", ...]   # or omit/empty to mark all as read
        }
        """
        serializer = MarkReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ids = serializer.validated_data["ids"]
        updated = mark_all_as_read(request.user, ids=ids)
        return Response({"marked_read": updated}, status=status.HTTP_200_OK)


class NotificationReadView(APIView):
    """
    POST /api/notifications/<notification_id>/read/
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, notification_id):
        updated = mark_as_read(request.user, notification_id)
        return Response({"marked_read": updated}, status=status.HTTP_200_OK)
