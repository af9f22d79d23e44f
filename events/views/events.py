from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from rest_framework import status
from django.shortcuts import get_object_or_404

from events.models import Event
from events.serializers import EventSerializer
from events.slots import generate_slots, format_slot, parse_event_date
from teams.services import slot_usage
from .generics import api_error


class EventListView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        events = Event.objects.filter(is_active=True)
        return Response(EventSerializer(events, many=True).data)


class EventSlotsView(APIView):
    """
    GET /api/events/<key>/slots/?date=YYYY-MM-DD

    Every slot of the day with how many teams already hold it.
    """
    permission_classes = [AllowAny]

    def get(self, request, key):
        event = get_object_or_404(Event, key=key)

        event_date = parse_event_date(request.query_params.get("date"))
        if event_date is None:
            return api_error("A valid date (YYYY-MM-DD) is required.", status.HTTP_400_BAD_REQUEST)

        usage = slot_usage(event, event_date)
        slots = []
        for slot in generate_slots(event):
            taken = usage.get(slot, 0)
            slots.append({
                "slot_time": format_slot(slot),
                "taken": taken,
                "available": taken < event.teams_per_slot,
            })

        return Response({
            "event": event.key,
            "event_date": event_date,
            "teams_per_slot": event.teams_per_slot,
            "slots": slots,
        })
