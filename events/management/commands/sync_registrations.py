import logging

from django.core.management.base import BaseCommand, CommandError

from core.supabase_client import SupabaseNotConfigured, fetch_registrations
from events.services import get_event, upsert_registration
from events.slots import parse_event_date

logger = logging.getLogger("teams.events")


class Command(BaseCommand):
    help = "Copies an event's roster from the hosted registration table into EventRegistration"

    def add_arguments(self, parser):
        parser.add_argument("--event", help="Event key (defaults to TEAMS_DEFAULT_EVENT)")

    def handle(self, *args, **options):
        event = get_event(options.get("event"))
        if event is None:
            raise CommandError("Event not found.")

        try:
            rows = fetch_registrations(event.key)
        except SupabaseNotConfigured as exc:
            raise CommandError(str(exc))

        created = updated = skipped = 0
        for row in rows:
            email = (row.get("user_email") or row.get("email") or "").strip()
            event_date = parse_event_date(row.get("event_date"))
            if not email or event_date is None:
                skipped += 1
                continue

            _, was_created = upsert_registration(event, email, event_date, reg_no=row.get("reg_no"))
            if was_created:
                created += 1
            else:
                updated += 1

        logger.info(f"Roster sync for {event.key}: created={created} updated={updated} skipped={skipped}")
        self.stdout.write(self.style.SUCCESS(
            f"Synced {event.key}: {created} new, {updated} updated, {skipped} skipped"
        ))
