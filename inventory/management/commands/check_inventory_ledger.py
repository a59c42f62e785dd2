from django.core.management.base import BaseCommand, CommandError
from inventory.selectors import ledger_discrepancies


class Command(BaseCommand):
    help = "Verify that every inventory quantity equals the sum of its history entries."

    def handle(self, *args, **options):
        problems = ledger_discrepancies()
        for row in problems:
            self.stderr.write(
                f"product={row['product_id']} quantity={row['quantity']} ledger_total={row['ledger_total']}"
            )
        if problems:
            raise CommandError(f"Inventory ledger mismatches: {len(problems)}")
        self.stdout.write(self.style.SUCCESS("Inventory ledger consistent"))
