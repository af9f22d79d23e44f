# teams/views/join_requests.py

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import status
from django.shortcuts import get_object_or_404

from events.views.generics import api_error
from teams import services
from teams.models import JoinRequest
from teams.permissions import is_teams_admin
from teams.serializers import (
    JoinRequestSerializer,
    JoinRequestRespondSerializer,
    TeamRefSerializer,
)


class JoinRequestListCreateView(APIView):
    """
    GET  /api/teams/join-requests/             pending requests for teams I lead
         ?leader_id=<id>                       (admins only) someone else's
    POST /api/teams/join-requests/  {"team_id"} ask to join a team
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        leader_id = request.query_params.get("leader_id")
        if leader_id and not is_teams_admin(request.user):
            return api_error("You can only view requests for your own teams.", status.HTTP_403_FORBIDDEN)
        if leader_id and not leader_id.isdigit():
            return api_error("leader_id must be a number.", status.HTTP_400_BAD_REQUEST)

        requests = (
            JoinRequest.objects
            .filter(
                team__leader_id=int(leader_id) if leader_id else request.user.id,
                status=JoinRequest.STATUS_PENDING,
            )
            .select_related("team", "user")
        )
        return Response(JoinRequestSerializer(requests, many=True).data)

    def post(self, request):
        serializer = TeamRefSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        join_request = services.create_join_request(request.user, serializer.validated_data["team_id"])

        return Response(
            {
                "message": "Join request created.",
                "request": JoinRequestSerializer(join_request).data,
            },
            status=status.HTTP_201_CREATED,
        )


class JoinRequestRespondView(APIView):
    """
    POST /api/teams/join-requests/<id>/respond/  {"action": "accept" | "reject"}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, request_id):
        serializer = JoinRequestRespondSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error("Missing or invalid fields.", status.HTTP_400_BAD_REQUEST)

        join_request = get_object_or_404(
            JoinRequest.objects.select_related("team", "team__event", "user"),
            pk=request_id,
        )

        message = services.respond_to_join_request(
            join_request,
            serializer.validated_data["action"],
            request.user,
        )
        return Response({"message": message})
