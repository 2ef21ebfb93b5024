from django.urls import path

from .views import ConversationDetailView, ConversationListView, ConversationReadView

urlpatterns = [
    path("", ConversationListView.as_view(), name="conversations"),
    path("<uuid:user_id>/", ConversationDetailView.as_view(), name="conversation-detail"),
    path("<uuid:user_id>/read/", ConversationReadView.as_view(), name="conversation-read"),
]
