"""
users/apps.py — App configuration for the "users" app

Purpose
===============================================================================
Register the accounts & auth app with Django.

Key Points
- default_auto_field: Use BigAutoField for primary keys across models in this app.
- name: Must match the dotted path used in INSTALLED_APPS ("users").
- The custom user model (Account) lives here; AUTH_USER_MODEL points at it.
"""

from django.apps import AppConfig


class UsersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'users'
    verbose_name = "Accounts & Auth"
