from rest_framework import serializers

from .models import AnnouncementBanner


class AnnouncementBannerSerializer(serializers.ModelSerializer):
    class Meta:
        model = AnnouncementBanner
        fields = [
            'id',
            'title',
            'message',
            'color',
            'is_active',
            'start_date',
            'end_date',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['created_by', 'created_at', 'updated_at']
        extra_kwargs = {'start_date': {'required': False}}
