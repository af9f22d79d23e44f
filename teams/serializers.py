# teams/serializers.py
from rest_framework import serializers

from events.slots import format_slot
from users.serializers import MemberSerializer
from .models import JoinRequest, RandomPoolEntry, Team


class TeamSerializer(serializers.ModelSerializer):
    """Team with its roster; members are listed in join order."""
    event = serializers.CharField(source='event.key', read_only=True)
    slot_time = serializers.SerializerMethodField()
    leader_id = serializers.IntegerField(read_only=True)
    members = serializers.SerializerMethodField()
    current_size = serializers.SerializerMethodField()
    max_size = serializers.IntegerField(source='event.max_team_size', read_only=True)
    is_full = serializers.SerializerMethodField()

    class Meta:
        model = Team
        fields = [
            'id', 'name', 'event', 'event_date', 'slot_time', 'leader_id',
            'members', 'current_size', 'max_size', 'is_full', 'score',
            'is_random', 'created_at',
        ]
        read_only_fields = fields

    def _users(self, obj):
        return [m.user for m in obj.members.all()]

    def get_slot_time(self, obj):
        return format_slot(obj.slot_time)

    def get_members(self, obj):
        return MemberSerializer(self._users(obj), many=True).data

    def get_current_size(self, obj):
        return len(obj.members.all())

    def get_is_full(self, obj):
        return len(obj.members.all()) >= obj.event.max_team_size


class TeamCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    event = serializers.SlugField(required=False, allow_blank=True)
    slot_time = serializers.CharField()


class TeamRefSerializer(serializers.Serializer):
    """Body of join / leave / join-request calls."""
    team_id = serializers.IntegerField()


class JoinRandomSerializer(serializers.Serializer):
    event = serializers.SlugField(required=False, allow_blank=True)


class JoinRequestSerializer(serializers.ModelSerializer):
    team_id = serializers.IntegerField(read_only=True)
    team_name = serializers.CharField(source='team.name', read_only=True)
    user = MemberSerializer(read_only=True)

    class Meta:
        model = JoinRequest
        fields = ['id', 'team_id', 'team_name', 'user', 'status', 'created_at', 'handled_at']
        read_only_fields = fields


class JoinRequestRespondSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=['accept', 'reject'])


class RandomPoolEntrySerializer(serializers.ModelSerializer):
    event = serializers.CharField(source='event.key', read_only=True)
    user = MemberSerializer(read_only=True)

    class Meta:
        model = RandomPoolEntry
        fields = ['id', 'event', 'event_date', 'user', 'queued_at']
        read_only_fields = fields


# ---- Admin payloads ----------------------------------------------------


class MergeTeamsSerializer(serializers.Serializer):
    source_team_id = serializers.IntegerField()
    target_team_id = serializers.IntegerField()


class AssignLeaderSerializer(serializers.Serializer):
    team_id = serializers.IntegerField()
    new_leader_id = serializers.IntegerField()


class AssignFromPoolSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    team_id = serializers.IntegerField()
    event = serializers.SlugField(required=False, allow_blank=True)


class GenerateRandomTeamsSerializer(serializers.Serializer):
    event = serializers.SlugField(required=False, allow_blank=True)
    team_size = serializers.IntegerField(required=False, min_value=1)
    dry_run = serializers.BooleanField(required=False, default=False)
    seed = serializers.IntegerField(required=False, allow_null=True)
