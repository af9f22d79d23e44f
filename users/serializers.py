from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'name',
            'reg_no',
            'email',
            'role',
            'is_onboarded',
            'date_joined',
        ]


class MemberSerializer(serializers.ModelSerializer):
    """Compact participant shape used inside team payloads."""
    name = serializers.CharField(source='display_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'reg_no']
