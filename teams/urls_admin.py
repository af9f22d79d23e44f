# teams/urls_admin.py - administrator adjudication API

from django.urls import path
from .views import (
    MergeTeamsView,
    AssignLeaderView,
    RandomPoolView,
    GenerateRandomTeamsView,
    AssignFromPoolView,
)

urlpatterns = [
    path("merge-teams/", MergeTeamsView.as_view(), name="admin-merge-teams"),
    path("assign-leader/", AssignLeaderView.as_view(), name="admin-assign-leader"),
    path("random-pool/", RandomPoolView.as_view(), name="admin-random-pool"),
    path("generate-random-teams/", GenerateRandomTeamsView.as_view(), name="admin-generate-random-teams"),
    path("assign-from-pool/", AssignFromPoolView.as_view(), name="admin-assign-from-pool"),
]
