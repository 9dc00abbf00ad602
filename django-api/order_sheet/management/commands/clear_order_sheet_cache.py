from django.core.management.base import BaseCommand, CommandError

from order_sheet.domain import ReportDate
from order_sheet.domain.errors import InvalidDateError
from order_sheet.services.factory import build_order_cache


class Command(BaseCommand):
    help = "Clear cached order sheets for one date, or for every date."

    def add_arguments(self, parser):
        parser.add_argument("--date", help="Only clear this date (YYYY-MM-DD).")

    def handle(self, *args, **options):
        raw = options.get("date")
        day = None
        if raw:
            try:
                day = ReportDate.parse(raw).value
            except InvalidDateError as exc:
                raise CommandError(exc.message) from exc

        build_order_cache().invalidate(day)
        if day is None:
            self.stdout.write(self.style.SUCCESS("Cleared all cached order sheets."))
        else:
            self.stdout.write(self.style.SUCCESS(f"Cleared cached order sheet for {day.isoformat()}."))
