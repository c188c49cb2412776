"""Management command to assign a store role to an existing account.

Role elevation is not exposed by any endpoint; this command is the
administrative path for it.

Usage:
    python manage.py set_role owner@example.com admin
    python manage.py set_role former-admin@example.com user
"""

import logging

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from nexuscart.core.models import Role

logger = logging.getLogger(__name__)

User = get_user_model()


class Command(BaseCommand):
    help = "Set the store role (user or admin) of an existing account"

    def add_arguments(self, parser):
        parser.add_argument("email", help="Email of the account to change")
        parser.add_argument("role", choices=Role.values, help="Role to assign")

    def handle(self, *args, **options):
        email = options["email"].strip()
        role = options["role"]

        try:
            user = User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            raise CommandError(f"No account with email {email}")

        if user.role == role:
            self.stdout.write(f"{user.email} already has role {role}")
            return

        old_role = user.role
        user.role = role
        user.save(update_fields=["role"])

        logger.info(
            "Store role changed",
            extra={"user_id": str(user.pk), "from_role": old_role, "to_role": role},
        )
        self.stdout.write(self.style.SUCCESS(f"{user.email}: {old_role} -> {role}"))
