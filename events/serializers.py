from rest_framework import serializers

from .models import Event, EventRegistration
from .slots import generate_slots, format_slot


class EventSerializer(serializers.ModelSerializer):
    slots = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = [
            "id",
            "key",
            "name",
            "max_team_size",
            "min_random_team_size",
            "first_slot",
            "slot_minutes",
            "slot_count",
            "teams_per_slot",
            "slots",
            "is_active",
        ]
        read_only_fields = fields

    def get_slots(self, obj):
        return [format_slot(s) for s in generate_slots(obj)]


class RegistrationSerializer(serializers.ModelSerializer):
    event = serializers.CharField(source="event.key", read_only=True)

    class Meta:
        model = EventRegistration
        fields = ["id", "event", "email", "reg_no", "event_date", "user", "registered_at"]
        read_only_fields = fields
