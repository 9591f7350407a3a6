"""
models.py — Accounts for the Department Board


Purpose
===============================================================================
Store who may sign in and what they may do:
- Account: email + salted password hash + role (ADMIN or USER)


Auth model
- Custom user model (AUTH_USER_MODEL = "users.Account") so that the email is
  the login field and the role lives on the row itself.
- Passwords go through Django's hashers (set_password/check_password); the
  raw password is never stored.


Design notes
- Emails are stored lower-cased; lookups use iexact as well, so "Ann@X.edu"
  and "ann@x.edu" are the same account. The unique constraint on the column
  is the storage-level guard against duplicates.
- Role is fixed at creation. There is no promotion flow: ADMIN accounts are
  provisioned with `manage.py create_portal_admin`, everyone else arrives
  through login auto-registration as USER.
- is_staff/is_superuser only exist so the Django admin keeps working for
  provisioned admins; the portal itself only ever looks at `role`.
"""

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models


class Role(models.TextChoices):
    ADMIN = "ADMIN", "Admin"
    USER = "USER", "User"


class AccountManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("An email address is required.")
        account = self.model(email=self.normalize_email(email).lower(), **extra_fields)
        account.set_password(password)
        account.save(using=self._db)
        return account

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("role", Role.USER)
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields["role"] = Role.ADMIN
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        return self._create_user(email, password, **extra_fields)

    def get_by_natural_key(self, email):
        return self.get(email__iexact=email)


class Account(AbstractBaseUser, PermissionsMixin):
    email = models.EmailField(unique=True, help_text="Login identifier (stored lower-case).")
    name = models.CharField(max_length=150, blank=True, null=True, help_text="Optional display name.")
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.USER, db_index=True)
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False, help_text="Can log into the Django admin site.")
    created_at = models.DateTimeField(auto_now_add=True)

    objects = AccountManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Account"
        verbose_name_plural = "Accounts"

    def __str__(self):
        return self.email

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)
