"""
Unit tests for session token issuance and verification (users.tokens).

No database: tokens are verified from their signature and claims alone.
"""
from datetime import timedelta

import jwt
from django.test import RequestFactory, SimpleTestCase
from django.utils import timezone
from rest_framework_simplejwt.settings import api_settings

from users import tokens


def _claims(**overrides):
    now = timezone.now()
    claims = {
        "token_type": "access",
        "exp": int((now + timedelta(days=1)).timestamp()),
        "iat": int(now.timestamp()),
        "jti": "test-jti",
        "user_id": 7,
        "email": "head@dept.edu",
        "role": "ADMIN",
    }
    claims.update(overrides)
    return claims


class IssueAndVerifyTests(SimpleTestCase):
    def test_round_trip_returns_same_identity(self):
        raw = tokens.issue(7, "head@dept.edu", "ADMIN")
        identity = tokens.verify(raw)
        self.assertEqual(identity.account_id, 7)
        self.assertEqual(identity.email, "head@dept.edu")
        self.assertEqual(identity.role, "ADMIN")
        self.assertTrue(identity.is_admin)
        self.assertTrue(identity.is_authenticated)

    def test_token_carries_expected_claims(self):
        issued_at = timezone.now()
        raw = tokens.issue(3, "s@dept.edu", "USER", issued_at=issued_at)
        payload = jwt.decode(raw, options={"verify_signature": False})
        self.assertEqual(payload["token_type"], "access")
        self.assertEqual(payload["user_id"], 3)
        self.assertEqual(payload["role"], "USER")
        self.assertIn("jti", payload)
        self.assertEqual(payload["exp"] - payload["iat"], int(timedelta(days=7).total_seconds()))

    def test_valid_until_just_before_seven_days(self):
        issued_at = timezone.now()
        raw = tokens.issue(1, "a@dept.edu", "USER", issued_at=issued_at)
        identity = tokens.verify(raw, now=issued_at + timedelta(days=7) - timedelta(minutes=1))
        self.assertEqual(identity.account_id, 1)

    def test_expired_at_and_after_seven_days(self):
        issued_at = timezone.now()
        raw = tokens.issue(1, "a@dept.edu", "USER", issued_at=issued_at)
        with self.assertRaises(tokens.ExpiredToken):
            tokens.verify(raw, now=issued_at + timedelta(days=7))
        with self.assertRaises(tokens.ExpiredToken):
            tokens.verify(raw, now=issued_at + timedelta(days=8))

    def test_token_issued_in_the_past_is_expired_now(self):
        raw = tokens.issue(1, "a@dept.edu", "USER", issued_at=timezone.now() - timedelta(days=8))
        with self.assertRaises(tokens.ExpiredToken) as ctx:
            tokens.verify(raw)
        self.assertEqual(ctx.exception.code, "token_expired")


class RejectedTokenTests(SimpleTestCase):
    def assertInvalid(self, raw):
        with self.assertRaises(tokens.InvalidToken) as ctx:
            tokens.verify(raw)
        self.assertEqual(ctx.exception.code, "invalid_token")

    def test_garbage_and_empty(self):
        self.assertInvalid("not-a-token")
        self.assertInvalid("a.b.c")
        self.assertInvalid("")
        self.assertInvalid(None)

    def test_wrong_secret(self):
        self.assertInvalid(jwt.encode(_claims(), "another-deployment-secret-of-reasonable-length", algorithm="HS256"))

    def test_tampered_payload_keeps_old_signature(self):
        raw = tokens.issue(5, "s@dept.edu", "USER")
        header, _, signature = raw.split(".")
        forged = jwt.encode(_claims(user_id=5, role="ADMIN"), "forger-secret-of-reasonable-length", algorithm="HS256")
        _, forged_payload, _ = forged.split(".")
        self.assertInvalid(f"{header}.{forged_payload}.{signature}")

    def test_unsigned_token(self):
        self.assertInvalid(jwt.encode(_claims(), None, algorithm="none"))

    def test_wrong_token_type(self):
        self.assertInvalid(jwt.encode(_claims(token_type="refresh"), api_settings.SIGNING_KEY, algorithm="HS256"))

    def test_missing_or_unknown_role(self):
        claims = _claims()
        del claims["role"]
        self.assertInvalid(jwt.encode(claims, api_settings.SIGNING_KEY, algorithm="HS256"))
        self.assertInvalid(jwt.encode(_claims(role="ROOT"), api_settings.SIGNING_KEY, algorithm="HS256"))

    def test_missing_expiry(self):
        claims = _claims()
        del claims["exp"]
        self.assertInvalid(jwt.encode(claims, api_settings.SIGNING_KEY, algorithm="HS256"))

    def test_correctly_signed_manual_token_is_accepted(self):
        identity = tokens.verify(jwt.encode(_claims(), api_settings.SIGNING_KEY, algorithm="HS256"))
        self.assertEqual(identity.as_dict(), {"id": 7, "email": "head@dept.edu", "role": "ADMIN"})


class ExtractRawTokenTests(SimpleTestCase):
    def test_header_wins_over_cookie(self):
        factory = RequestFactory()
        factory.cookies["authToken"] = "from-cookie"
        request = factory.get("/", HTTP_AUTHORIZATION="Bearer from-header")
        self.assertEqual(tokens.extract_raw_token(request), "from-header")

    def test_cookie_used_without_header(self):
        factory = RequestFactory()
        factory.cookies["authToken"] = "from-cookie"
        self.assertEqual(tokens.extract_raw_token(factory.get("/")), "from-cookie")

    def test_non_bearer_header_falls_back_to_cookie(self):
        request = RequestFactory().get("/", HTTP_AUTHORIZATION="Basic abc")
        self.assertIsNone(tokens.extract_raw_token(request))

    def test_cookie_can_be_refused(self):
        factory = RequestFactory()
        factory.cookies["authToken"] = "from-cookie"
        self.assertIsNone(tokens.extract_raw_token(factory.post("/"), allow_cookie=False))
        request = factory.post("/", HTTP_AUTHORIZATION="Bearer from-header")
        self.assertEqual(tokens.extract_raw_token(request, allow_cookie=False), "from-header")
