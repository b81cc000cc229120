from django.core.management.base import BaseCommand

from orders.models import Order
from orders.services import OrderLedger


class Command(BaseCommand):
    help = "Delete paid and closed orders with their lines and payments, freeing their tables"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be deleted without making changes",
        )

    def handle(self, *args, **options):
        if options["dry_run"]:
            count = Order.objects.filter(
                status__in=[Order.OrderStatus.PAID, Order.OrderStatus.CLOSED]
            ).count()
            self.stdout.write(self.style.WARNING("DRY RUN MODE - No changes will be made"))
            self.stdout.write(f"Would delete {count} finished orders")
            return

        count = OrderLedger.purge_finished_orders()
        self.stdout.write(self.style.SUCCESS(f"Deleted {count} finished orders"))
