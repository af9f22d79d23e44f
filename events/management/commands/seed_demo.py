from datetime import date, timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from events.models import Event
from events.services import upsert_registration
from teams import services as team_services

User = get_user_model()


class Command(BaseCommand):
    help = "Seeds the default event with demo participants, roster rows and a random pool"

    def add_arguments(self, parser):
        parser.add_argument("--participants", type=int, default=10)

    def handle(self, *args, **options):
        self.stdout.write("🌱 Seeding data...")

        # 1. Event
        event, created = Event.objects.get_or_create(
            key=settings.TEAMS_DEFAULT_EVENT,
            defaults={"name": "Escape.exe II"},
        )
        self.stdout.write(f"{'Created' if created else 'Used'} event: {event.name}")

        # 2. Participants + roster, spread over two days
        days = [date.today() + timedelta(days=7), date.today() + timedelta(days=8)]
        participants = []
        for i in range(1, options["participants"] + 1):
            email = f"participant{i}@example.com"
            user, _ = User.objects.get_or_create(
                username=f"participant{i}",
                defaults={
                    "email": email,
                    "name": f"Participant {i}",
                    "reg_no": f"23BCE{i:04d}",
                    "is_onboarded": True,
                },
            )
            user.set_password("password")
            user.save()
            reg, _ = upsert_registration(event, email, days[i % 2], reg_no=user.reg_no)
            if reg.user_id != user.id:
                reg.user = user
                reg.save(update_fields=["user"])
            participants.append(user)

        # 3. Everyone not yet placed waits in the random pool
        queued = 0
        for user in participants:
            if team_services.find_membership(user, event) is None:
                _, was_queued = team_services.enqueue_random(user, event)
                queued += int(was_queued)

        self.stdout.write(self.style.SUCCESS(
            f"✅ Seeded {len(participants)} participants, {queued} newly queued for random teams"
        ))
