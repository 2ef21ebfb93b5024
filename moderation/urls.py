from django.urls import path

from .views import OrganizationApprovalView, PendingApprovalsView, ProjectApprovalView

urlpatterns = [
    path("", PendingApprovalsView.as_view(), name="pending-approvals"),
    path("organizations/<uuid:organization_id>/", OrganizationApprovalView.as_view(), name="organization-approval"),
    path("projects/<uuid:project_id>/", ProjectApprovalView.as_view(), name="project-approval"),
]
