"""
Remove duplicate connected accounts so each user keeps one.

Usage:
    python manage.py dedupe_connected_accounts
    python manage.py dedupe_connected_accounts --user-id 42 --dry-run
"""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db.models import Count

from payments.models import ConnectedAccount
from payments.services import ConnectService

User = get_user_model()


class Command(BaseCommand):
    help = (
        "Keep one connected account per user (charges-enabled first, then "
        "newest), delete the rest and repoint the user's listings."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--user-id",
            type=int,
            help="Only dedupe this user's accounts",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report what would change without changing anything",
        )

    def handle(self, *args, **options):
        user_id = options.get("user_id")
        dry_run = options["dry_run"]

        if user_id is not None:
            users = User.objects.filter(pk=user_id)
            if not users.exists():
                raise CommandError(f"User {user_id} does not exist")
        else:
            duplicate_owner_ids = (
                ConnectedAccount.objects.values("user_id")
                .annotate(total=Count("id"))
                .filter(total__gt=1)
                .values_list("user_id", flat=True)
            )
            users = User.objects.filter(pk__in=list(duplicate_owner_ids))

        removed_total = 0
        for user in users:
            result = ConnectService.dedupe_user_accounts(user, dry_run=dry_run)
            data = result.data
            if not data["removed"]:
                continue
            removed_total += len(data["removed"])
            self.stdout.write(
                f"{user.email}: keep {data['kept']}, "
                f"remove {', '.join(data['removed'])}, "
                f"{data['listings_updated']} listings repointed"
            )

        verb = "Would remove" if dry_run else "Removed"
        self.stdout.write(
            self.style.SUCCESS(f"{verb} {removed_total} duplicate connected accounts.")
        )
