from django.contrib.auth import authenticate, get_user_model
from rest_framework import serializers

User = get_user_model()


class OnboardingSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True)
    # Only needed when the authenticated account carries no email yet
    email = serializers.EmailField(required=False)


class ParticipantLoginSerializer(serializers.Serializer):
    """
    Participants sign in with their registration number; username or
    email work as well.
    """
    reg_no = serializers.CharField(required=False, allow_blank=True)
    username = serializers.CharField(required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        if not (attrs.get("reg_no") or attrs.get("username") or attrs.get("email")):
            raise serializers.ValidationError("Missing registration number or password.")
        return attrs

    def find_user(self):
        data = self.validated_data
        if data.get("reg_no"):
            return User.objects.filter(reg_no__iexact=data["reg_no"].strip()).first()
        if data.get("username"):
            return User.objects.filter(username=data["username"]).first()
        return User.objects.filter(email=data["email"].strip().lower()).first()


class AdminLoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        user = authenticate(
            username=attrs.get("username"),
            password=attrs.get("password"),
        )

        if not user or not user.is_teams_admin:
            raise serializers.ValidationError("Invalid credentials.")

        attrs["user"] = user
        return attrs
