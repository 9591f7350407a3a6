"""
users/admin.py — Django Admin configuration for accounts

Purpose
===============================================================================
Let provisioned admins inspect who has signed up and with which role.

How to read this file (plain English):
- list_display: columns shown in the admin list page (the big table).
- list_filter: right-hand sidebar filters to narrow results without typing.
- search_fields: text search across chosen fields (substring match).
- ordering: default sort order in the list page.

Notes
- Accounts are created by login auto-registration or by
  `manage.py create_portal_admin`, never from this page (no add permission).
- Role is read-only; there is no promotion flow. The password hash is never
  shown.
"""

from django.contrib import admin

from .models import Account


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ("email", "name", "role", "is_active", "created_at")
    list_filter = ("role", "is_active")
    search_fields = ("email", "name", "=id")
    ordering = ("-created_at",)
    fields = ("email", "name", "role", "is_active", "is_staff", "last_login", "created_at")
    readonly_fields = ("email", "role", "last_login", "created_at")

    def has_add_permission(self, request):
        return False
