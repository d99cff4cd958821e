from django.core.management.base import BaseCommand

from records.models import Diagnostic
from records.services.hospitalizations import invalidate_diagnostics
from records.services.users import ensure_departments

DIAGNOSTICS = [
    'Paludisme',
    'Paludisme grave',
    'Hypertension artérielle',
    'Diabète',
    'Anémie',
    'Pneumonie',
    'Gastro-entérite',
    'Fièvre typhoïde',
    'Insuffisance cardiaque',
    'Accident vasculaire cérébral',
    'Infection urinaire',
    'Tuberculose',
]


class Command(BaseCommand):
    help = "Create the hospital departments and the diagnostics reference list (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument('--no-diagnostics', action='store_true', help="Only create departments.")

    def handle(self, *args, **opts):
        created = ensure_departments()
        self.stdout.write(self.style.SUCCESS(f"departments: {created} created"))
        if opts['no_diagnostics']:
            return
        added = 0
        for name in DIAGNOSTICS:
            _, was_created = Diagnostic.objects.get_or_create(name=name)
            added += int(was_created)
        if added:
            invalidate_diagnostics()
        self.stdout.write(self.style.SUCCESS(f"diagnostics: {added} created"))
