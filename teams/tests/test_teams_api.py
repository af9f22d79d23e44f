from django.db.models import ProtectedError
from rest_framework import status

from teams import services
from teams.models import JoinRequest, RandomPoolEntry, Team, TeamMember
from .base import DAY_ONE, DAY_TWO, TeamsTestCase


class TeamCreateTests(TeamsTestCase):
    def setUp(self):
        super().setUp()
        self.alice = self.participant("alice")

    def test_create_team_makes_creator_leader_and_member(self):
        self.auth(self.alice)
        resp = self.client.post(
            "/api/teams/",
            {"name": "Null Pointers", "slot_time": "11:30"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)

        data = resp.json()
        self.assertEqual(data["message"], "Team 'Null Pointers' created successfully!")
        team = data["team"]
        self.assertEqual(team["leader_id"], self.alice.id)
        self.assertEqual(team["slot_time"], "11:30:00")
        self.assertEqual(team["event_date"], DAY_ONE.isoformat())
        self.assertEqual(team["current_size"], 1)
        self.assertEqual(team["max_size"], 4)
        self.assertFalse(team["is_full"])
        self.assertEqual([m["id"] for m in team["members"]], [self.alice.id])

    def test_unregistered_user_cannot_create(self):
        stranger = self.participant("stranger", registered=False)
        self.auth(stranger)
        resp = self.client.post("/api/teams/", {"name": "Ghosts", "slot_time": "11:00"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIn("not verified for this event", resp.json()["message"])
        self.assertFalse(Team.objects.exists())

    def test_cannot_create_second_team(self):
        self.team(self.alice, "First")
        self.auth(self.alice)
        resp = self.client.post("/api/teams/", {"name": "Second", "slot_time": "12:00"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.json()["message"], "User is already in a team.")

    def test_duplicate_name_is_case_insensitive(self):
        bob = self.participant("bob")
        self.team(bob, "Bit Flippers")
        self.auth(self.alice)
        resp = self.client.post("/api/teams/", {"name": "bit flippers", "slot_time": "12:00"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Team.objects.count(), 1)

    def test_slot_outside_schedule_is_rejected(self):
        self.auth(self.alice)
        resp = self.client.post("/api/teams/", {"name": "Early Birds", "slot_time": "09:00"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["message"], "Invalid slot time for this event.")

    def test_malformed_slot_is_rejected(self):
        self.auth(self.alice)
        resp = self.client.post("/api/teams/", {"name": "Early Birds", "slot_time": "noon"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_full_slot_is_rejected(self):
        self.team(self.participant("bob"), "One", slot="11:00:00")
        self.team(self.participant("carol"), "Two", slot="11:00:00")

        self.auth(self.alice)
        resp = self.client.post("/api/teams/", {"name": "Three", "slot_time": "11:00"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["message"], "Slot 11:00:00 is full. Please pick another slot.")

    def test_same_slot_on_another_day_is_free(self):
        self.team(self.participant("bob"), "One", slot="11:00:00")
        self.team(self.participant("carol"), "Two", slot="11:00:00")

        dave = self.participant("dave", event_date=DAY_TWO)
        self.auth(dave)
        resp = self.client.post("/api/teams/", {"name": "Three", "slot_time": "11:00"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)

    def test_creating_a_team_clears_pool_entry(self):
        RandomPoolEntry.objects.create(event=self.event, user=self.alice, event_date=DAY_ONE)
        self.auth(self.alice)
        resp = self.client.post("/api/teams/", {"name": "Solo", "slot_time": "11:00"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertFalse(RandomPoolEntry.objects.filter(user=self.alice).exists())


class TeamListTests(TeamsTestCase):
    def test_filter_by_date_and_lookup_by_id(self):
        day_one = self.team(self.participant("alice"), "Day One")
        self.team(self.participant("bob", event_date=DAY_TWO), "Day Two")

        self.auth(self.admin)
        resp = self.client.get("/api/teams/", {"event_date": DAY_ONE.isoformat()})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([t["name"] for t in resp.json()], ["Day One"])

        resp = self.client.get("/api/teams/", {"id": day_one.id})
        self.assertEqual(resp.json()["name"], "Day One")

        resp = self.client.get("/api/teams/", {"id": 999})
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.json()["message"], "Team with ID 999 not found.")

    def test_bad_date_filter(self):
        self.auth(self.admin)
        resp = self.client.get("/api/teams/", {"event_date": "14-03-2026"})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_requires_authentication(self):
        resp = self.client.get("/api/teams/")
        self.assertIn(resp.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_my_team(self):
        alice = self.participant("alice")
        self.auth(alice)
        resp = self.client.get("/api/teams/me/")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.json()["message"], "You are not in a team yet.")

        team = self.team(alice, "Mine")
        resp = self.client.get("/api/teams/me/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["id"], team.id)


class JoinTeamTests(TeamsTestCase):
    def setUp(self):
        super().setUp()
        self.leader = self.participant("leader")
        self.team_obj = self.team(self.leader, "Segfaults")

    def test_join(self):
        bob = self.participant("bob")
        self.auth(bob)
        resp = self.client.post("/api/teams/join/", {"team_id": self.team_obj.id}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["team"]["current_size"], 2)
        self.assertTrue(TeamMember.objects.filter(team=self.team_obj, user=bob).exists())

    def test_join_drops_pool_entry_and_other_requests(self):
        other = self.team(self.participant("carol"), "Other", slot="12:00:00")
        bob = self.participant("bob")
        RandomPoolEntry.objects.create(event=self.event, user=bob, event_date=DAY_ONE)
        JoinRequest.objects.create(team=other, user=bob)

        self.auth(bob)
        resp = self.client.post("/api/teams/join/", {"team_id": self.team_obj.id}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(RandomPoolEntry.objects.filter(user=bob).exists())
        self.assertFalse(JoinRequest.objects.filter(user=bob, status=JoinRequest.STATUS_PENDING).exists())

    def test_join_full_team(self):
        for name in ("b", "c", "d"):
            services.join_team(self.participant(name), self.team_obj.id)

        late = self.participant("late")
        self.auth(late)
        resp = self.client.post("/api/teams/join/", {"team_id": self.team_obj.id}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.json()["message"], "Team is already full.")
        self.assertEqual(self.team_obj.members.count(), 4)

    def test_join_team_on_another_day(self):
        dave = self.participant("dave", event_date=DAY_TWO)
        self.auth(dave)
        resp = self.client.post("/api/teams/join/", {"team_id": self.team_obj.id}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_join_missing_team(self):
        self.auth(self.participant("bob"))
        resp = self.client.post("/api/teams/join/", {"team_id": 4242}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.json()["message"], "Team not found.")

    def test_placed_participant_gets_conflict_for_unknown_team(self):
        self.auth(self.leader)
        resp = self.client.post("/api/teams/join/", {"team_id": 99999}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.json()["message"], "User is already in a team.")

    def test_cannot_join_twice(self):
        self.auth(self.leader)
        resp = self.client.post("/api/teams/join/", {"team_id": self.team_obj.id}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)


class JoinRandomTests(TeamsTestCase):
    def test_queue_once(self):
        alice = self.participant("alice")
        self.auth(alice)

        resp = self.client.post("/api/teams/join-random/", {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.json()["entry"]["event_date"], DAY_ONE.isoformat())

        resp = self.client.post("/api/teams/join-random/", {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(RandomPoolEntry.objects.filter(user=alice).count(), 1)

    def test_placed_participant_cannot_queue(self):
        alice = self.participant("alice")
        self.team(alice, "Solo")
        self.auth(alice)
        resp = self.client.post("/api/teams/join-random/", {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(RandomPoolEntry.objects.exists())

    def test_unregistered_participant_cannot_queue(self):
        self.auth(self.participant("ghost", registered=False))
        resp = self.client.post("/api/teams/join-random/", {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_event(self):
        self.auth(self.participant("alice"))
        resp = self.client.post("/api/teams/join-random/", {"event": "nope"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)


class LeaveTeamTests(TeamsTestCase):
    def setUp(self):
        super().setUp()
        self.leader = self.participant("leader")
        self.bob = self.participant("bob")
        self.team_obj = self.team(self.leader, "Stack Smashers", members=[self.bob])

    def test_member_leaves(self):
        self.auth(self.bob)
        resp = self.client.post("/api/teams/leave/", {"team_id": self.team_obj.id}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(resp.json()["disbanded"])
        self.assertEqual(self.team_obj.members.count(), 1)

    def test_leader_with_members_cannot_leave(self):
        self.auth(self.leader)
        resp = self.client.post("/api/teams/leave/", {"team_id": self.team_obj.id}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.team_obj.members.count(), 2)

    def test_last_leader_disbands(self):
        self.auth(self.bob)
        self.client.post("/api/teams/leave/", {"team_id": self.team_obj.id}, format="json")

        self.auth(self.leader)
        resp = self.client.post("/api/teams/leave/", {"team_id": self.team_obj.id}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.json()["disbanded"])
        self.assertFalse(Team.objects.filter(pk=self.team_obj.id).exists())

    def test_outsider_cannot_leave(self):
        self.auth(self.participant("carol"))
        resp = self.client.post("/api/teams/leave/", {"team_id": self.team_obj.id}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)


    def test_last_member_of_leaderless_team_disbands_it(self):
        # legacy row whose leader was cleared outside the API
        Team.objects.filter(pk=self.team_obj.id).update(leader=None)
        TeamMember.objects.filter(team=self.team_obj, user=self.leader).delete()

        self.auth(self.bob)
        resp = self.client.post("/api/teams/leave/", {"team_id": self.team_obj.id}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.json()["disbanded"])
        self.assertFalse(Team.objects.filter(pk=self.team_obj.id).exists())

    def test_leader_account_cannot_be_deleted_while_leading(self):
        with self.assertRaises(ProtectedError):
            self.leader.delete()
        self.team_obj.refresh_from_db()
        self.assertEqual(self.team_obj.leader_id, self.leader.id)

class TeamScoreTests(TeamsTestCase):
    def setUp(self):
        super().setUp()
        self.alice = self.participant("alice")
        self.team_obj = self.team(self.alice, "Scorers")

    def test_admin_sets_score(self):
        self.auth(self.admin)
        resp = self.client.patch(f"/api/teams/{self.team_obj.id}/score/", {"score": 42}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.team_obj.refresh_from_db()
        self.assertEqual(self.team_obj.score, 42)

    def test_participant_cannot_set_score(self):
        self.auth(self.alice)
        resp = self.client.patch(f"/api/teams/{self.team_obj.id}/score/", {"score": 100}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_score_must_be_number(self):
        self.auth(self.admin)
        resp = self.client.patch(f"/api/teams/{self.team_obj.id}/score/", {"score": "lots"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["message"], "Score must be a number.")
