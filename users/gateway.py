"""
users/gateway.py — Admin gate for post creation/edit pages

Purpose
===============================================================================
Decide, before any view runs, whether a request for an ADMIN-only page may
proceed. The decision is a pure function of (path, token, now) plus the
signing secret, see `evaluate()`; `AdminGateMiddleware` only applies it.

Decision table (paths under settings.PORTAL_ADMIN_GATED_PREFIXES)
===============================================================================
no token                 → redirect PORTAL_LOGIN_URL ?redirect=<path>&error=authentication_required
invalid / expired token  → redirect PORTAL_LOGIN_URL ?redirect=<path>&error=invalid_token&message=Please login again
                           and delete the authToken cookie so a retry doesn't loop on it
role != ADMIN            → redirect PORTAL_HOME_URL ?error=unauthorized&message=Admin access required
role == ADMIN            → admit; request.portal_identity = TokenIdentity

Every other path passes through untouched with request.portal_identity = None.
Identity lives on the request object only; nothing is cached across requests.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from urllib.parse import urlencode

from django.conf import settings
from django.http import HttpResponseRedirect

from . import tokens
from .models import Role

logger = logging.getLogger(__name__)

PASS = "pass"
ADMIT = "admit"
REDIRECT = "redirect"

REASON_AUTH_REQUIRED = "authentication_required"
REASON_INVALID_TOKEN = "invalid_token"
REASON_UNAUTHORIZED = "unauthorized"


@dataclass(frozen=True)
class GateDecision:
    action: str
    location: str | None = None
    reason: str | None = None
    clear_token: bool = False
    identity: tokens.TokenIdentity | None = None


def is_gated(path: str, prefixes=None) -> bool:
    prefixes = settings.PORTAL_ADMIN_GATED_PREFIXES if prefixes is None else prefixes
    return any(path.startswith(prefix) for prefix in prefixes)


def _with_query(url: str, params: dict) -> str:
    joiner = "&" if "?" in url else "?"
    return f"{url}{joiner}{urlencode(params)}"


def evaluate(path: str, raw_token: str | None, now: datetime | None = None, prefixes=None) -> GateDecision:
    if not is_gated(path, prefixes):
        return GateDecision(action=PASS)

    if not raw_token:
        return GateDecision(
            action=REDIRECT,
            location=_with_query(settings.PORTAL_LOGIN_URL, {"redirect": path, "error": REASON_AUTH_REQUIRED}),
            reason=REASON_AUTH_REQUIRED,
        )

    try:
        identity = tokens.verify(raw_token, now=now)
    except tokens.TokenVerificationError:
        return GateDecision(
            action=REDIRECT,
            location=_with_query(
                settings.PORTAL_LOGIN_URL,
                {"redirect": path, "error": REASON_INVALID_TOKEN, "message": "Please login again"},
            ),
            reason=REASON_INVALID_TOKEN,
            clear_token=True,
        )

    if identity.role != Role.ADMIN:
        return GateDecision(
            action=REDIRECT,
            location=_with_query(
                settings.PORTAL_HOME_URL,
                {"error": REASON_UNAUTHORIZED, "message": "Admin access required"},
            ),
            reason=REASON_UNAUTHORIZED,
        )

    return GateDecision(action=ADMIT, identity=identity)


class AdminGateMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.portal_identity = None
        decision = evaluate(request.path, tokens.extract_raw_token(request))

        if decision.action == REDIRECT:
            logger.info("Admin gate redirected %s (%s)", request.path, decision.reason)
            response = HttpResponseRedirect(decision.location)
            if decision.clear_token:
                response.delete_cookie(settings.PORTAL_AUTH_COOKIE, samesite="Strict")
            return response

        if decision.action == ADMIT:
            request.portal_identity = decision.identity
        return self.get_response(request)
