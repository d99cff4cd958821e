from django.core.management.base import BaseCommand
from django.utils import timezone

from records.services.hospitalizations import invalidate_diagnostics, list_diagnostics


class Command(BaseCommand):
    help = "Drop and warm the API caches (diagnostics reference list)."

    def handle(self, *args, **options):
        invalidate_diagnostics()
        data = list_diagnostics()
        self.stdout.write(self.style.SUCCESS(f"Refreshed diagnostics cache ({len(data)} entries) at {timezone.now()}"))
