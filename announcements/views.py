from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import AnnouncementBanner
from .serializers import AnnouncementBannerSerializer
from .services import create_announcement, deactivate_announcement, get_active_announcements


class AnnouncementViewSet(viewsets.ModelViewSet):
    """
    Announcement banners.
    - List / retrieve: anyone; only banners on display (staff: ?all=true for every banner)
    - Create / update / delete / deactivate: staff
    """
    serializer_class = AnnouncementBannerSerializer

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [permissions.AllowAny()]
        return [permissions.IsAdminUser()]

    def get_queryset(self):
        user = self.request.user
        show_all = self.request.query_params.get("all", "").lower() in ("1", "true", "yes")
        if user.is_staff and (show_all or self.action not in ("list", "retrieve")):
            return AnnouncementBanner.objects.all()
        return get_active_announcements()

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        banner = create_announcement(request.user, serializer.validated_data)
        return Response(self.get_serializer(banner).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def deactivate(self, request, pk=None):
        banner = self.get_object()
        deactivate_announcement(banner)
        return Response(self.get_serializer(banner).data)
