"""
Management command: create_portal_admin
---------------------------------------

Purpose:
    Provision an ADMIN account. This is the only way an account gets the
    ADMIN role; login auto-registration always creates USER accounts.

Behavior:
    - Refuses to touch an existing email (roles are fixed at creation).
    - The password is hashed like any other account password.
    - The account can also sign into the Django admin site.

Usage:
    python manage.py create_portal_admin --email head@dept.edu --password 's3cret' [--name "Head of Dept"]
"""

from django.core.management.base import BaseCommand, CommandError

from users.models import Account


class Command(BaseCommand):
    help = "Create an ADMIN account for the portal."

    def add_arguments(self, parser):
        parser.add_argument("--email", required=True)
        parser.add_argument("--password", required=True)
        parser.add_argument("--name", default=None)

    def handle(self, *args, **opts):
        email = opts["email"].strip().lower()
        if not opts["password"].strip():
            raise CommandError("Password may not be blank.")
        if Account.objects.filter(email__iexact=email).exists():
            raise CommandError(f"An account for {email} already exists.")

        account = Account.objects.create_superuser(
            email=email, password=opts["password"], name=opts["name"] or None
        )
        self.stdout.write(self.style.SUCCESS(f"Created ADMIN account {account.email} (id={account.pk})."))
