from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import JoinRequestReviewView, OrganizationViewSet

router = DefaultRouter()
router.register(r'', OrganizationViewSet, basename='organization')

urlpatterns = [
    path("requests/<uuid:request_id>/", JoinRequestReviewView.as_view(), name="join-request-review"),
    path("", include(router.urls)),
]
