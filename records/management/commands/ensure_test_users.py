# records/management/commands/ensure_test_users.py
from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand

from records.models import Department, DepartmentMember, User
from records.services.users import ensure_departments

TEST_SET = [
    ("admin1", "admin", None),
    ("sagefemme1", "nurse", "maternite"),
    ("medecin1", "doctor", "medecine"),
]


class Command(BaseCommand):
    help = "Ensure test users exist with a known password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument('--password', default="Comores2024!", help="Password set on every test user.")

    def handle(self, *args, **opts):
        ensure_departments()
        password = make_password(opts['password'])
        for username, role, dept in TEST_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={"role": role, "password": password, "is_active": True},
            )
            if not created:
                # reset password, activation and role
                u.password = password
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            if dept:
                DepartmentMember.objects.get_or_create(user=u, department=Department.objects.get(slug=dept))
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role}{', ' + dept if dept else ''})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
