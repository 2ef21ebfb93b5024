# users/views.py

from django.contrib.auth import get_user_model
from django.db.models import Avg, Count, Q
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from projects.serializers import ReviewSerializer
from projects.services import get_user_reviews
from .serializers import PublicProfileSerializer, UpdateProfileSerializer, UserSerializer

User = get_user_model()


class UserViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Profiles API.
    - GET   /api/users/?search=    public profiles
    - GET   /api/users/{id}/
    - GET   /api/users/me/   PATCH /api/users/me/
    - GET   /api/users/{id}/reviews/
    """
    queryset = User.objects.filter(is_active=True)
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        if self.action == 'list':
            return PublicProfileSerializer
        return super().get_serializer_class()

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action == 'list':
            search = self.request.query_params.get('search')
            if not search:
                return queryset.none()
            queryset = queryset.filter(Q(name__icontains=search) | Q(username__icontains=search))
        return queryset.order_by('username')

    @action(detail=False, methods=['get', 'patch'])
    def me(self, request):
        """
        GET   /api/users/me/  -> current user
        PATCH /api/users/me/  -> update profile fields
        """
        if request.method == 'PATCH':
            serializer = UpdateProfileSerializer(request.user, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()

        return Response(UserSerializer(request.user).data)

    @action(detail=True, methods=['get'])
    def reviews(self, request, pk=None):
        """
        GET /api/users/{pk}/reviews/
        Reviews received by the user, with their average rating.
        """
        user = self.get_object()
        reviews = get_user_reviews(user.pk)
        summary = reviews.aggregate(average=Avg('rating'), count=Count('id'))

        return Response({
            "average_rating": round(summary['average'], 2) if summary['average'] is not None else None,
            "count": summary['count'],
            "reviews": ReviewSerializer(reviews, many=True).data,
        })
