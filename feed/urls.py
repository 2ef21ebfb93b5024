from django.urls import path

from .views import (
    FeedCommentDetailView,
    FeedCommentListCreateView,
    FeedPostDetailView,
    FeedPostListCreateView,
    ToggleLikeView,
)

urlpatterns = [
    path("", FeedPostListCreateView.as_view(), name="feed-posts"),
    path("<uuid:post_id>/", FeedPostDetailView.as_view(), name="feed-post-detail"),
    path("<uuid:post_id>/like/", ToggleLikeView.as_view(), name="feed-post-like"),
    path("<uuid:post_id>/comments/", FeedCommentListCreateView.as_view(), name="feed-post-comments"),
    path(
        "<uuid:post_id>/comments/<uuid:comment_id>/",
        FeedCommentDetailView.as_view(),
        name="feed-comment-detail",
    ),
]
