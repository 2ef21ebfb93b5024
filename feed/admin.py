from django.contrib import admin
from .models import FeedPost, FeedLike, FeedComment


@admin.register(FeedPost)
class FeedPostAdmin(admin.ModelAdmin):
    list_display = ('author', 'organization', 'location', 'created_at')
    search_fields = ('content', 'author__username', 'organization__name')
    date_hierarchy = 'created_at'


@admin.register(FeedLike)
class FeedLikeAdmin(admin.ModelAdmin):
    list_display = ('user', 'post', 'created_at')


@admin.register(FeedComment)
class FeedCommentAdmin(admin.ModelAdmin):
    list_display = ('user', 'post', 'created_at')
    search_fields = ('content', 'user__username')
