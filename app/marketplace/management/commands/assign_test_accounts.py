"""
Give listings without a Stripe account a generated test account.

Usage:
    python manage.py assign_test_accounts
"""

from django.core.management.base import BaseCommand

from marketplace.models import Listing
from marketplace.services import ListingService


class Command(BaseCommand):
    help = "Assign acct_test_ Stripe ids to listings that have none and make them available."

    def handle(self, *args, **options):
        pending = Listing.objects.missing_stripe_account().count()
        if pending == 0:
            self.stdout.write(self.style.SUCCESS("No listings need a test account."))
            return

        self.stdout.write(f"Found {pending} listings without a Stripe account")
        updated = ListingService.assign_test_accounts()
        self.stdout.write(
            self.style.SUCCESS(f"Assigned test accounts to {updated} listings.")
        )
