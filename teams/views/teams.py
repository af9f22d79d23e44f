# teams/views/teams.py - Participant team API

import logging

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import status
from django.shortcuts import get_object_or_404

from events.services import get_event
from events.slots import parse_event_date
from events.views.generics import api_error
from teams import services
from teams.models import Team
from teams.permissions import IsTeamsAdmin
from teams.serializers import (
    TeamSerializer,
    TeamCreateSerializer,
    TeamRefSerializer,
    JoinRandomSerializer,
    RandomPoolEntrySerializer,
)

logger = logging.getLogger("teams.api")


def team_queryset():
    return (
        Team.objects
        .select_related("event")
        .prefetch_related("members__user")
    )


def team_payload(team_id):
    return TeamSerializer(team_queryset().get(pk=team_id)).data


class TeamListCreateView(APIView):
    """
    GET  /api/teams/?event=<key>&event_date=YYYY-MM-DD&id=<id>
    POST /api/teams/  {"name", "event", "slot_time"}
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        team_id = request.query_params.get("id")
        if team_id:
            team = team_queryset().filter(pk=team_id).first() if team_id.isdigit() else None
            if team is None:
                return api_error(f"Team with ID {team_id} not found.", status.HTTP_404_NOT_FOUND)
            return Response(TeamSerializer(team).data)

        teams = team_queryset()

        event_key = request.query_params.get("event")
        if event_key:
            teams = teams.filter(event__key=event_key)

        raw_date = request.query_params.get("event_date")
        if raw_date:
            event_date = parse_event_date(raw_date)
            if event_date is None:
                return api_error("event_date must be YYYY-MM-DD.", status.HTTP_400_BAD_REQUEST)
            teams = teams.filter(event_date=event_date)

        return Response(TeamSerializer(teams, many=True).data)

    def post(self, request):
        serializer = TeamCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        event = get_event(data.get("event"))
        if event is None:
            return api_error("Event not found.", status.HTTP_404_NOT_FOUND)

        team = services.create_team(request.user, event, data["name"], data["slot_time"])

        return Response(
            {
                "message": f"Team '{team.name}' created successfully!",
                "team": team_payload(team.id),
            },
            status=status.HTTP_201_CREATED,
        )


class TeamDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, team_id):
        team = get_object_or_404(team_queryset(), pk=team_id)
        return Response(TeamSerializer(team).data)


class MyTeamView(APIView):
    """GET /api/teams/me/?event=<key> - the caller's team, 404 if none."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        event = get_event(request.query_params.get("event"))
        if event is None:
            return api_error("Event not found.", status.HTTP_404_NOT_FOUND)

        member = services.find_membership(request.user, event)
        if member is None:
            return api_error("You are not in a team yet.", status.HTTP_404_NOT_FOUND)

        return Response(team_payload(member.team_id))


class JoinTeamView(APIView):
    """POST /api/teams/join/  {"team_id"}"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = TeamRefSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        team = services.join_team(request.user, serializer.validated_data["team_id"])

        return Response(
            {
                "message": f"Successfully joined team '{team.name}'!",
                "team": team_payload(team.id),
            },
            status=status.HTTP_200_OK,
        )


class JoinRandomView(APIView):
    """
    POST /api/teams/join-random/  {"event"}

    Queues the caller in the random pool; an administrator later runs
    the allocator to form teams.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = JoinRandomSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        event = get_event(serializer.validated_data.get("event"))
        if event is None:
            return api_error("Event not found.", status.HTTP_404_NOT_FOUND)

        entry, created = services.enqueue_random(request.user, event)

        if created:
            message = "You have been added to the random pool. A team will be assigned to you soon."
        else:
            message = "You are already in the random pool."

        return Response(
            {
                "message": message,
                "entry": RandomPoolEntrySerializer(entry).data,
            },
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class LeaveTeamView(APIView):
    """POST /api/teams/leave/  {"team_id"}"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = TeamRefSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        outcome = services.leave_team(request.user, serializer.validated_data["team_id"])

        if outcome == "disbanded":
            message = "You have left the team, and the team has been disbanded."
        else:
            message = "You have successfully left the team."
        return Response({"message": message, "disbanded": outcome == "disbanded"})


class TeamScoreView(APIView):
    """
    PATCH /api/teams/<id>/score/  {"score": <number>}
    """
    permission_classes = [IsAuthenticated, IsTeamsAdmin]

    def patch(self, request, team_id):
        score = request.data.get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            return api_error("Score must be a number.", status.HTTP_400_BAD_REQUEST)
        if isinstance(score, float) and not score.is_integer():
            return api_error("Score must be a whole number.", status.HTTP_400_BAD_REQUEST)

        team = get_object_or_404(Team, pk=team_id)
        services.set_score(team, int(score))

        return Response({"message": f"Score for '{team.name}' updated to {int(score)}."})
