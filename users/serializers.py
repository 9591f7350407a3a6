"""
serializers.py — DRF serializers for accounts


Purpose
===============================================================================
Validate the login payload and define the public JSON shape of an account.

Principles
- The password hash never leaves the server: AccountSerializer lists its
  fields explicitly and everything is read-only.
- Emails are normalized (trimmed, lower-cased) here so the view compares
  like with like.
"""

from rest_framework import serializers

from .models import Account


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False, style={"input_type": "password"})
    name = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=150)

    def validate_email(self, value):
        return value.strip().lower()

    def validate_password(self, value):
        if not value.strip():
            raise serializers.ValidationError("Password may not be blank.")
        return value

    def validate_name(self, value):
        return (value or "").strip() or None


class AccountSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Account
        fields = ["id", "email", "name", "role", "createdAt"]
        read_only_fields = fields
