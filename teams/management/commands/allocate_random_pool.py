import json

from django.core.management.base import BaseCommand, CommandError
from django.core.serializers.json import DjangoJSONEncoder

from events.services import get_event
from teams.allocator import run_allocation


class Command(BaseCommand):
    help = "Forms teams from an event's random pool (same allocator as the admin endpoint)"

    def add_arguments(self, parser):
        parser.add_argument("--event", help="Event key (defaults to TEAMS_DEFAULT_EVENT)")
        parser.add_argument("--team-size", type=int, default=None)
        parser.add_argument("--seed", type=int, default=None)
        parser.add_argument("--dry-run", action="store_true")

    def handle(self, *args, **options):
        event = get_event(options.get("event"))
        if event is None:
            raise CommandError("Event not found.")

        summary = run_allocation(
            event,
            team_size=options["team_size"],
            dry_run=options["dry_run"],
            seed=options["seed"],
        )
        self.stdout.write(json.dumps(summary, cls=DjangoJSONEncoder, indent=2))

        verb = "Would create" if options["dry_run"] else "Created"
        count = len(summary.get("planned_teams", summary["created_team_ids"]))
        self.stdout.write(self.style.SUCCESS(
            f"{verb} {count} team(s); {len(summary['remaining'])} participant(s) still queued"
        ))
