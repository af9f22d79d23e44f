from datetime import date

from django.test import TestCase
from rest_framework.test import APIClient

from events.models import Event, EventRegistration
from teams import services
from users.models import User


DAY_ONE = date(2026, 3, 14)
DAY_TWO = date(2026, 3, 15)


class TeamsTestCase(TestCase):
    """Default event plus helpers to register participants and build teams."""

    def setUp(self):
        self.client = APIClient()
        self.event = Event.objects.create(
            key="escape-exe-ii",
            name="Escape.exe II",
            max_team_size=4,
            min_random_team_size=2,
            teams_per_slot=2,
        )
        self.admin = User.objects.create_user(
            username="organiser",
            password="pass",
            role=User.ROLE_ADMIN,
            is_staff=True,
        )

    def auth(self, user):
        self.client.force_authenticate(user=user)

    def participant(self, username, event_date=DAY_ONE, registered=True):
        user = User.objects.create_user(
            username=username,
            password="pass",
            email=f"{username}@example.com",
            name=username.title(),
            reg_no=f"23BCE{User.objects.count():04d}",
        )
        if registered:
            EventRegistration.objects.create(
                event=self.event,
                email=user.email,
                reg_no=user.reg_no,
                event_date=event_date,
                user=user,
            )
        return user

    def team(self, leader, name, slot="11:00:00", members=()):
        team = services.create_team(leader, self.event, name, slot)
        for user in members:
            services.join_team(user, team.id)
        return team
