"""
users/tokens.py — Session token issuance & stateless verification

Purpose
===============================================================================
A session token is a SimpleJWT access token (HS256) that carries enough to
authorize a request without touching the database:

    user_id, email, role, iat, exp, jti, token_type="access"

- issue()  → signs a token valid for SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"]
             (7 days) from the moment of issuance.
- verify() → checks signature, algorithm, token type and claims, then expiry
             against an explicit `now`. Raises InvalidToken or ExpiredToken.

verify() never queries the database, so the admin gate middleware can call it
before any other work happens. The payload role is trusted as issued; there is
no revocation list (logout only discards the client copy).
"""
from dataclasses import dataclass
from datetime import datetime

import jwt
from django.conf import settings
from django.utils import timezone
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken
from rest_framework_simplejwt.utils import datetime_to_epoch

from .models import Role


class TokenVerificationError(Exception):
    code = "invalid_token"


class InvalidToken(TokenVerificationError):
    """Malformed, unsigned, tampered, or carrying the wrong claims."""
    code = "invalid_token"


class ExpiredToken(TokenVerificationError):
    """Correctly signed, but past its validity window."""
    code = "token_expired"


@dataclass(frozen=True)
class TokenIdentity:
    """
    Who a verified token says the caller is.

    Doubles as DRF's request.user for token-authenticated API calls, hence
    the user-like attributes.
    """
    account_id: int
    email: str
    role: str

    is_authenticated = True
    is_anonymous = False

    @property
    def pk(self):
        return self.account_id

    @property
    def id(self):
        return self.account_id

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def as_dict(self) -> dict:
        return {"id": self.account_id, "email": self.email, "role": self.role}


def issue(account_id, email: str, role: str, issued_at: datetime | None = None) -> str:
    issued_at = issued_at or timezone.now()
    token = AccessToken()
    token.set_exp(from_time=issued_at, lifetime=api_settings.ACCESS_TOKEN_LIFETIME)
    token["iat"] = datetime_to_epoch(issued_at)
    token[api_settings.USER_ID_CLAIM] = account_id
    token["email"] = email
    token["role"] = role
    return str(token)


def issue_for(account) -> str:
    return issue(account.pk, account.email, account.role)


def verify(raw_token: str, now: datetime | None = None) -> TokenIdentity:
    if not raw_token or not isinstance(raw_token, str):
        raise InvalidToken("No token supplied.")

    try:
        payload = jwt.decode(
            raw_token,
            api_settings.SIGNING_KEY,
            algorithms=[api_settings.ALGORITHM],
            options={"verify_exp": False, "verify_iat": False, "require": ["exp"]},
        )
    except jwt.InvalidTokenError as exc:
        raise InvalidToken(str(exc)) from exc

    if payload.get(api_settings.TOKEN_TYPE_CLAIM) != AccessToken.token_type:
        raise InvalidToken("Wrong token type.")

    account_id = payload.get(api_settings.USER_ID_CLAIM)
    email = payload.get("email")
    role = payload.get("role")
    if account_id in (None, "") or not email or role not in Role.values:
        raise InvalidToken("Token is missing identity claims.")

    now = now or timezone.now()
    try:
        expires_at = float(payload["exp"])
    except (TypeError, ValueError) as exc:
        raise InvalidToken("Malformed expiry claim.") from exc
    if expires_at <= now.timestamp():
        raise ExpiredToken("Token is expired.")

    return TokenIdentity(account_id=account_id, email=email, role=role)


def extract_raw_token(request, allow_cookie: bool = True) -> str | None:
    """`Authorization: Bearer <token>` wins over the authToken cookie."""
    header = request.META.get("HTTP_AUTHORIZATION", "")
    parts = header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    if not allow_cookie:
        return None
    return request.COOKIES.get(settings.PORTAL_AUTH_COOKIE) or None
