# teams/views/admin.py - Administrator adjudication API

import logging

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import status

from events.services import get_event
from events.views.generics import api_error
from teams import services
from teams.allocator import run_allocation
from teams.permissions import IsTeamsAdmin
from teams.serializers import (
    MergeTeamsSerializer,
    AssignLeaderSerializer,
    AssignFromPoolSerializer,
    GenerateRandomTeamsSerializer,
)
from users.serializers import MemberSerializer
from .teams import team_queryset, team_payload

logger = logging.getLogger("teams.api")


class AdminAPIView(APIView):
    permission_classes = [IsAuthenticated, IsTeamsAdmin]


class MergeTeamsView(AdminAPIView):
    """
    POST /api/admin/merge-teams/  {"source_team_id", "target_team_id"}

    Moves the source team's members into the target (same event and
    date, within capacity) and deletes the source team.
    """

    def post(self, request):
        serializer = MergeTeamsSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error("Missing source_team_id or target_team_id.", status.HTTP_400_BAD_REQUEST)

        target, merged_count = services.merge_teams(
            serializer.validated_data["source_team_id"],
            serializer.validated_data["target_team_id"],
        )

        return Response({
            "message": "Teams merged successfully.",
            "target_team_id": target.id,
            "merged_count": merged_count,
            "team": team_payload(target.id),
        })


class AssignLeaderView(AdminAPIView):
    """
    GET  /api/admin/assign-leader/?team_id=<id>   members with leader flag
    POST /api/admin/assign-leader/  {"team_id", "new_leader_id"}
    """

    def get(self, request):
        team_id = request.query_params.get("team_id")
        if not team_id:
            return api_error("Missing team_id parameter.", status.HTTP_400_BAD_REQUEST)

        team = team_queryset().filter(pk=team_id).first() if team_id.isdigit() else None
        if team is None:
            return api_error("Team not found.", status.HTTP_404_NOT_FOUND)

        users = [m.user for m in team.members.all()]
        current = next((u for u in users if u.id == team.leader_id), None)

        members = []
        for user in users:
            data = MemberSerializer(user).data
            data["is_current_leader"] = user.id == team.leader_id
            members.append(data)

        return Response({
            "team_id": team.id,
            "team_name": team.name,
            "event": team.event.key,
            "event_date": team.event_date,
            "current_leader": MemberSerializer(current).data if current else None,
            "members": members,
        })

    def post(self, request):
        serializer = AssignLeaderSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error("Missing team_id or new_leader_id.", status.HTTP_400_BAD_REQUEST)

        team, previous, new_leader = services.assign_leader(
            serializer.validated_data["team_id"],
            serializer.validated_data["new_leader_id"],
        )

        return Response({
            "message": "Team leader assigned successfully.",
            "team_id": team.id,
            "team_name": team.name,
            "previous_leader": MemberSerializer(previous).data if previous else None,
            "new_leader": MemberSerializer(new_leader).data,
        })


class RandomPoolView(AdminAPIView):
    """GET /api/admin/random-pool/?event=<key>"""

    def get(self, request):
        event = get_event(request.query_params.get("event"))
        if event is None:
            return api_error("Event not found.", status.HTTP_404_NOT_FOUND)
        return Response(services.pool_stats(event))


class GenerateRandomTeamsView(AdminAPIView):
    """
    GET  /api/admin/generate-random-teams/?event=<key>
         Registered participants not yet in a team.
    POST /api/admin/generate-random-teams/  {"event", "team_size", "dry_run", "seed"}
         Run the random pool allocator.
    """

    def get(self, request):
        event = get_event(request.query_params.get("event"))
        if event is None:
            return api_error("Event not found.", status.HTTP_404_NOT_FOUND)

        return Response({
            "event": event.key,
            "unassigned_users": services.unassigned_participants(event),
        })

    def post(self, request):
        serializer = GenerateRandomTeamsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        event = get_event(data.get("event"))
        if event is None:
            return api_error("Event not found.", status.HTTP_404_NOT_FOUND)

        if not event.pool_entries.exists():
            return api_error("No users in random pool to assign.", status.HTTP_400_BAD_REQUEST)

        summary = run_allocation(
            event,
            team_size=data.get("team_size"),
            dry_run=data.get("dry_run", False),
            seed=data.get("seed"),
        )
        logger.info(f"Random allotment triggered by admin={request.user.id} event={event.key}")

        summary["message"] = "Random allotment preview." if summary["dry_run"] else "Random allotment complete."
        return Response(summary)


class AssignFromPoolView(AdminAPIView):
    """
    POST /api/admin/assign-from-pool/  {"user_id", "team_id", "event"}
    """

    def post(self, request):
        serializer = AssignFromPoolSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error("Missing user_id or team_id.", status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        event = get_event(data.get("event"))
        if event is None:
            return api_error("Event not found.", status.HTTP_404_NOT_FOUND)

        team, user = services.assign_from_pool(data["user_id"], data["team_id"], event)

        return Response({
            "message": f"User assigned to team '{team.name}'.",
            "team": team_payload(team.id),
            "user": MemberSerializer(user).data,
        })
