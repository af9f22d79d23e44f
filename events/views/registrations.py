from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import status

from events.models import EventRegistration
from events.serializers import RegistrationSerializer
from events.services import get_event, get_registration
from teams.permissions import is_teams_admin
from .generics import api_error


class MyRegistrationView(APIView):
    """
    GET /api/events/registration/me/?event=<key>

    Returns the caller's roster row (most importantly `event_date`).
    Admins may look up someone else with ?email=.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        event = get_event(request.query_params.get("event"))
        if event is None:
            return api_error("Event not found.", status.HTTP_404_NOT_FOUND)

        email = request.query_params.get("email")
        if email and is_teams_admin(request.user):
            reg = EventRegistration.objects.filter(event=event, email=email.strip().lower()).first()
        else:
            reg = get_registration(request.user, event)

        if reg is None:
            return api_error("Registration not found.", status.HTTP_404_NOT_FOUND)

        data = RegistrationSerializer(reg).data
        return Response(data, status=status.HTTP_200_OK)
