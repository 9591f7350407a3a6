"""
users/authentication.py — DRF authentication backed by users.tokens

The caller's identity comes straight from the verified token (TokenIdentity);
no account row is loaded per request.

- PortalTokenAuthentication          → bad token = 401 with a reason code.
- OptionalPortalTokenAuthentication  → bad token = anonymous caller. Used by
  the public feed so a stale cookie never hides the posts.

The authToken cookie is only honoured on safe methods. DRF does no CSRF check
for non-session authentication, so writes must carry the Authorization header,
which a cross-site form cannot set.
"""
from rest_framework import authentication, exceptions, permissions

from . import tokens


class PortalTokenAuthentication(authentication.BaseAuthentication):
    www_authenticate_realm = "api"

    def authenticate(self, request):
        raw_token = tokens.extract_raw_token(
            request, allow_cookie=request.method in permissions.SAFE_METHODS
        )
        if raw_token is None:
            return None
        try:
            identity = tokens.verify(raw_token)
        except tokens.TokenVerificationError as exc:
            return self.on_invalid_token(exc)
        return identity, raw_token

    def on_invalid_token(self, exc):
        detail = "Token is expired" if isinstance(exc, tokens.ExpiredToken) else "Invalid token"
        raise exceptions.AuthenticationFailed(detail, code=exc.code)

    def authenticate_header(self, request):
        return f'Bearer realm="{self.www_authenticate_realm}"'


class OptionalPortalTokenAuthentication(PortalTokenAuthentication):
    def on_invalid_token(self, exc):
        return None
