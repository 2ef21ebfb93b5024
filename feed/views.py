from django.shortcuts import get_object_or_404
from rest_framework import permissions, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import FeedComment, FeedPost
from .serializers import (
    CreateCommentSerializer,
    CreatePostSerializer,
    FeedCommentSerializer,
    FeedPostSerializer,
)
from .services import (
    add_comment,
    create_post,
    delete_comment,
    delete_post,
    get_feed_posts,
    toggle_like,
)


class FeedPostListCreateView(APIView):
    """
    GET  /api/feed/?filter=all|following&limit=&offset=
    POST /api/feed/
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        qs = get_feed_posts(request.user, request.query_params.get("filter", "all"))

        try:
            limit_val = int(request.query_params.get("limit", 20))
            offset_val = int(request.query_params.get("offset", 0))
        except ValueError:
            return Response({"error": "Invalid pagination params"}, status=400)

        limit_val = max(1, min(limit_val, 100))
        offset_val = max(0, offset_val)

        total_count = qs.count()
        qs = qs[offset_val: offset_val + limit_val]

        serializer = FeedPostSerializer(qs, many=True, context={"request": request})
        return Response({
            "count": total_count,
            "results": serializer.data,
            "limit": limit_val,
            "offset": offset_val,
        })

    def post(self, request):
        serializer = CreatePostSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        post = create_post(
            request.user,
            data["content"],
            organization_id=data.get("organization_id"),
            location=data.get("location"),
            image_url=data.get("image_url"),
            tagged_organization_ids=data.get("tagged_organization_ids"),
        )
        return Response(
            FeedPostSerializer(post, context={"request": request}).data,
            status=status.HTTP_201_CREATED,
        )


class FeedPostDetailView(APIView):
    """
    DELETE /api/feed/<post_id>/
    """
    permission_classes = [permissions.IsAuthenticated]

    def delete(self, request, post_id):
        post = get_object_or_404(FeedPost, pk=post_id)
        if not delete_post(post, request.user):
            raise PermissionDenied("You can only delete your own posts")
        return Response(status=status.HTTP_204_NO_CONTENT)


class ToggleLikeView(APIView):
    """
    POST /api/feed/<post_id>/like/
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, post_id):
        post = get_object_or_404(FeedPost, pk=post_id)
        liked, likes_count = toggle_like(post, request.user)
        return Response({"liked": liked, "likes_count": likes_count})


class FeedCommentListCreateView(APIView):
    """
    GET  /api/feed/<post_id>/comments/
    POST /api/feed/<post_id>/comments/
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, post_id):
        post = get_object_or_404(FeedPost, pk=post_id)
        qs = post.comments.select_related("user").order_by("created_at")
        return Response(FeedCommentSerializer(qs, many=True).data)

    def post(self, request, post_id):
        post = get_object_or_404(FeedPost, pk=post_id)

        serializer = CreateCommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        comment = add_comment(post, request.user, serializer.validated_data["content"])
        return Response(FeedCommentSerializer(comment).data, status=status.HTTP_201_CREATED)


class FeedCommentDetailView(APIView):
    """
    DELETE /api/feed/<post_id>/comments/<comment_id>/
    """
    permission_classes = [permissions.IsAuthenticated]

    def delete(self, request, post_id, comment_id):
        comment = get_object_or_404(
            FeedComment.objects.select_related("post"),
            pk=comment_id,
            post_id=post_id,
        )
        if not delete_comment(comment, request.user):
            raise PermissionDenied("You can only delete your own comments")
        return Response(status=status.HTTP_204_NO_CONTENT)
