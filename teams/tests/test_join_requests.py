from rest_framework import status

from teams import services
from teams.models import JoinRequest, TeamMember
from .base import DAY_TWO, TeamsTestCase


class JoinRequestTests(TeamsTestCase):
    def setUp(self):
        super().setUp()
        self.leader = self.participant("leader")
        self.bob = self.participant("bob")
        self.team_obj = self.team(self.leader, "Heap Overflow")

    def request_to_join(self, user):
        return services.create_join_request(user, self.team_obj.id)

    def respond(self, join_request, action):
        return self.client.post(
            f"/api/teams/join-requests/{join_request.id}/respond/",
            {"action": action},
            format="json",
        )

    def test_create_request(self):
        self.auth(self.bob)
        resp = self.client.post("/api/teams/join-requests/", {"team_id": self.team_obj.id}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.json()["request"]["status"], "pending")
        self.assertEqual(resp.json()["request"]["user"]["id"], self.bob.id)

    def test_duplicate_pending_request(self):
        self.request_to_join(self.bob)
        self.auth(self.bob)
        resp = self.client.post("/api/teams/join-requests/", {"team_id": self.team_obj.id}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.json()["message"], "Join request already pending.")

    def test_request_for_other_day_rejected(self):
        self.auth(self.participant("dave", event_date=DAY_TWO))
        resp = self.client.post("/api/teams/join-requests/", {"team_id": self.team_obj.id}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_member_cannot_request(self):
        self.auth(self.leader)
        resp = self.client.post("/api/teams/join-requests/", {"team_id": self.team_obj.id}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

    def test_request_unknown_team(self):
        self.auth(self.bob)
        resp = self.client.post("/api/teams/join-requests/", {"team_id": 9999}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_placed_participant_gets_conflict_for_unknown_team(self):
        self.auth(self.leader)
        resp = self.client.post("/api/teams/join-requests/", {"team_id": 99999}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.json()["message"], "User is already in a team.")

    def test_leader_lists_pending_requests(self):
        self.request_to_join(self.bob)
        self.auth(self.leader)
        resp = self.client.get("/api/teams/join-requests/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.json()
        self.assertEqual(len(data), 1)
        self.assertEqual(data[0]["team_name"], "Heap Overflow")

    def test_only_admin_can_list_for_another_leader(self):
        self.request_to_join(self.bob)

        self.auth(self.bob)
        resp = self.client.get("/api/teams/join-requests/", {"leader_id": self.leader.id})
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        self.auth(self.admin)
        resp = self.client.get("/api/teams/join-requests/", {"leader_id": self.leader.id})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.json()), 1)

    def test_leader_accepts(self):
        join_request = self.request_to_join(self.bob)
        self.auth(self.leader)
        resp = self.respond(join_request, "accept")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["message"], "User added to team.")

        join_request.refresh_from_db()
        self.assertEqual(join_request.status, JoinRequest.STATUS_ACCEPTED)
        self.assertIsNotNone(join_request.handled_at)
        self.assertTrue(TeamMember.objects.filter(team=self.team_obj, user=self.bob).exists())

    def test_leader_rejects(self):
        join_request = self.request_to_join(self.bob)
        self.auth(self.leader)
        resp = self.respond(join_request, "reject")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

        join_request.refresh_from_db()
        self.assertEqual(join_request.status, JoinRequest.STATUS_REJECTED)
        self.assertFalse(TeamMember.objects.filter(user=self.bob).exists())

    def test_non_leader_cannot_respond(self):
        join_request = self.request_to_join(self.bob)
        self.auth(self.participant("carol"))
        resp = self.respond(join_request, "accept")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_can_respond(self):
        join_request = self.request_to_join(self.bob)
        self.auth(self.admin)
        resp = self.respond(join_request, "accept")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

    def test_already_handled(self):
        join_request = self.request_to_join(self.bob)
        self.auth(self.leader)
        self.respond(join_request, "reject")
        resp = self.respond(join_request, "accept")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["message"], "Request already handled.")

    def test_invalid_action(self):
        join_request = self.request_to_join(self.bob)
        self.auth(self.leader)
        resp = self.respond(join_request, "maybe")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_accepting_into_full_team_rejects_request(self):
        join_request = self.request_to_join(self.bob)
        for name in ("c", "d", "e"):
            services.join_team(self.participant(name), self.team_obj.id)

        self.auth(self.leader)
        resp = self.respond(join_request, "accept")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.json()["message"], "Team is full.")

        join_request.refresh_from_db()
        self.assertEqual(join_request.status, JoinRequest.STATUS_REJECTED)
        self.assertEqual(self.team_obj.members.count(), 4)

    def test_joining_elsewhere_drops_pending_request(self):
        self.request_to_join(self.bob)
        self.team(self.bob, "Own Team", slot="12:00:00")
        self.assertFalse(
            JoinRequest.objects.filter(user=self.bob, status=JoinRequest.STATUS_PENDING).exists()
        )
