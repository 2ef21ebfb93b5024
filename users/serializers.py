from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'name',
            'role',
            'bio',
            'location',
            'profile_image',
            'skills',
            'website',
            'linkedin_url',
            'is_onboarded',
            'date_joined',
        ]


class PublicProfileSerializer(serializers.ModelSerializer):
    """Profile fields embedded in applications, reviews, posts and comments."""

    class Meta:
        model = User
        fields = ['id', 'username', 'name', 'profile_image']


class UpdateProfileSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=False)

    class Meta:
        model = User
        fields = [
            'name', 'bio', 'location', 'profile_image', 'skills',
            'website', 'linkedin_url', 'is_onboarded', 'password',
        ]

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance
