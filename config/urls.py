from django.contrib import admin
from django.urls import path, include
from core.views import HealthCheckView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/auth/', include('authx.urls')),
    path('api/users/', include('users.urls')),
    path('api/organizations/', include('organizations.urls')),
    path('api/projects/', include('projects.urls')),
    path('api/notifications/', include('notifications.urls')),
    path('api/feed/', include('feed.urls')),
    path('api/messages/', include('messaging.urls')),
    path('api/admin/approvals/', include('moderation.urls')),
    path('api/announcements/', include('announcements.urls')),
    path("api/health/", HealthCheckView.as_view(), name="health-check"),
]
