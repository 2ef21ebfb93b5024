from django.urls import path

from .views import MyNotificationsView, NotificationReadView

urlpatterns = [
    path("", MyNotificationsView.as_view(), name="my-notifications"),
    path("<uuid:notification_id>/read/", NotificationReadView.as_view(), name="notification-read"),
]
