from django.contrib import admin
from .models import AnnouncementBanner


@admin.register(AnnouncementBanner)
class AnnouncementBannerAdmin(admin.ModelAdmin):
    list_display = ('title', 'color', 'is_active', 'start_date', 'end_date', 'created_by')
    list_filter = ('is_active', 'color')
    search_fields = ('title', 'message')
