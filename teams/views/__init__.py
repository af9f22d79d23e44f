from .teams import (
    TeamListCreateView,
    TeamDetailView,
    MyTeamView,
    JoinTeamView,
    JoinRandomView,
    LeaveTeamView,
    TeamScoreView,
)
from .join_requests import JoinRequestListCreateView, JoinRequestRespondView
from .admin import (
    MergeTeamsView,
    AssignLeaderView,
    RandomPoolView,
    GenerateRandomTeamsView,
    AssignFromPoolView,
)
