"""Management command to delete expired coupons."""

from django.core.management.base import BaseCommand

from rewardman.services.coupons import CouponLifecycle


class Command(BaseCommand):
    help = "Delete coupons whose expiry date has passed"

    def handle(self, *args, **options):
        deleted_count = CouponLifecycle.purge_expired()
        self.stdout.write(
            self.style.SUCCESS(f"Deleted {deleted_count} expired coupons.")
        )
