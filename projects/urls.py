from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    ApplicationStatusView,
    ApplyToProjectView,
    MyApplicationsView,
    NextPendingReviewView,
    PendingReviewActionView,
    ProjectApplicationsView,
    ProjectPhaseDetailView,
    ProjectPhaseListCreateView,
    ProjectReviewsView,
    ProjectViewSet,
)

router = DefaultRouter()
router.register(r'', ProjectViewSet, basename='project')

urlpatterns = [
    path("me/applications/", MyApplicationsView.as_view(), name="my-applications"),
    path("applications/<uuid:application_id>/", ApplicationStatusView.as_view(), name="application-status"),

    # Applications
    path("<uuid:project_id>/apply/", ApplyToProjectView.as_view(), name="project-apply"),
    path("<uuid:project_id>/applications/", ProjectApplicationsView.as_view(), name="project-applications"),

    # Phase tracker
    path("<uuid:project_id>/phases/", ProjectPhaseListCreateView.as_view(), name="project-phases"),
    path("<uuid:project_id>/phases/<uuid:phase_id>/", ProjectPhaseDetailView.as_view(), name="project-phase-detail"),

    # Reviews
    path("<uuid:project_id>/reviews/", ProjectReviewsView.as_view(), name="project-reviews"),
    path("<uuid:project_id>/reviews/next/", NextPendingReviewView.as_view(), name="project-reviews-next"),
    path(
        "<uuid:project_id>/reviews/pending/<uuid:pending_id>/<str:action>/",
        PendingReviewActionView.as_view(),
        name="pending-review-action",
    ),

    path("", include(router.urls)),
]
