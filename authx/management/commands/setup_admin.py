from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db.models import Q

User = get_user_model()


class Command(BaseCommand):
    help = "Creates the default administrator when no administrator exists yet"

    def add_arguments(self, parser):
        parser.add_argument("--username", default=settings.TEAMS_DEFAULT_ADMIN_USERNAME)
        parser.add_argument("--password", default=settings.TEAMS_DEFAULT_ADMIN_PASSWORD)

    def handle(self, *args, **options):
        admins = User.objects.filter(
            Q(role=User.ROLE_ADMIN) | Q(is_staff=True) | Q(is_superuser=True)
        )
        count = admins.count()
        if count:
            self.stdout.write(f"Admin users exist: {count}")
            return

        admin = User.objects.create_user(
            username=options["username"],
            password=options["password"],
            role=User.ROLE_ADMIN,
            is_staff=True,
        )
        self.stdout.write(self.style.SUCCESS(
            f"Default admin created: {admin.username} (change the password after first login)"
        ))
