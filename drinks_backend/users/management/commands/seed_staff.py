# users/management/commands/seed_staff.py

from __future__ import annotations

from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from permissions.roles import ROLE_ADMIN, ROLE_KITCHEN, ROLE_MOTOBOY, ROLE_PDV


@dataclass(frozen=True)
class SeedUser:
    role: str
    email: str
    name: str


STAFF_SEEDS = [
    SeedUser(ROLE_ADMIN, "admin@example.com", "Admin"),
    SeedUser(ROLE_KITCHEN, "kitchen@example.com", "Kitchen"),
    SeedUser(ROLE_PDV, "pdv@example.com", "Counter"),
    SeedUser(ROLE_MOTOBOY, "motoboy@example.com", "Motoboy"),
]


class Command(BaseCommand):
    help = "Seed one staff user per role (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            type=str,
            default="Pass1234!",
            help="Password for seeded users (default: Pass1234!)",
        )
        parser.add_argument(
            "--force-password",
            action="store_true",
            help="Reset password for existing seeded users too.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        password = options.get("password") or ""
        force_password = bool(options.get("force_password"))

        if len(password) < 6:
            raise CommandError("--password must be at least 6 characters.")

        User = get_user_model()
        created_count = 0

        for seed in STAFF_SEEDS:
            user, created = User.objects.get_or_create(
                email=seed.email,
                defaults={
                    "role": seed.role,
                    "name": seed.name,
                    "is_superuser": seed.role == ROLE_ADMIN,
                },
            )

            if user.role != seed.role:
                user.role = seed.role

            if created or force_password:
                user.set_password(password)

            user.save()
            created_count += int(created)

            self.stdout.write(f"{'created' if created else 'exists '} {seed.email} ({seed.role})")

        self.stdout.write(
            self.style.SUCCESS(f"Done. created={created_count} total={len(STAFF_SEEDS)}")
        )
