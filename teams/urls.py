# teams/urls.py - participant team API

from django.urls import path
from .views import (
    TeamListCreateView,
    TeamDetailView,
    MyTeamView,
    JoinTeamView,
    JoinRandomView,
    LeaveTeamView,
    TeamScoreView,
    JoinRequestListCreateView,
    JoinRequestRespondView,
)

urlpatterns = [
    path("", TeamListCreateView.as_view(), name="team-list-create"),
    path("me/", MyTeamView.as_view(), name="my-team"),
    path("join/", JoinTeamView.as_view(), name="team-join"),
    path("join-random/", JoinRandomView.as_view(), name="team-join-random"),
    path("leave/", LeaveTeamView.as_view(), name="team-leave"),

    # Join requests
    path("join-requests/", JoinRequestListCreateView.as_view(), name="join-request-list-create"),
    path(
        "join-requests/<int:request_id>/respond/",
        JoinRequestRespondView.as_view(),
        name="join-request-respond",
    ),

    path("<int:team_id>/", TeamDetailView.as_view(), name="team-detail"),
    path("<int:team_id>/score/", TeamScoreView.as_view(), name="team-score"),
]
