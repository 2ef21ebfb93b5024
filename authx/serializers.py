from django.contrib.auth import authenticate, get_user_model
from rest_framework import serializers

User = get_user_model()

SIGNUP_ROLES = [User.ROLE_USER, User.ROLE_PARTNER, User.ROLE_ORGANIZER]


class SignupSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8)
    role = serializers.ChoiceField(choices=SIGNUP_ROLES, required=False, default=User.ROLE_USER)

    class Meta:
        model = User
        fields = ['username', 'email', 'password', 'name', 'role']

    def validate_email(self, value):
        if value and User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("An account with this email already exists.")
        return value

    def create(self, validated_data):
        user = User.objects.create_user(
            username=validated_data['username'],
            email=validated_data.get('email', ''),
            password=validated_data['password'],
            name=validated_data.get('name', ''),
            role=validated_data.get('role', User.ROLE_USER),
        )
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        email = attrs.get("email")
        password = attrs.get("password")

        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            raise serializers.ValidationError("Invalid credentials")

        # Django authenticates by username
        user = authenticate(username=user.username, password=password)
        if not user:
            raise serializers.ValidationError("Invalid credentials")

        attrs["user"] = user
        return attrs
