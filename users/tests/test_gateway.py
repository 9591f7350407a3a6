"""
Tests for the admin gate: the pure decision function and the middleware
applied to the /create and /post pages.
"""
from datetime import timedelta
from urllib.parse import parse_qs, urlsplit

from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone

from posts.models import Post
from users import gateway, tokens

PREFIXES = ("/create", "/post")


def _query(location):
    parts = urlsplit(location)
    return parts.path, {k: v[0] for k, v in parse_qs(parts.query).items()}


@override_settings(PORTAL_LOGIN_URL="/auth", PORTAL_HOME_URL="/")
class EvaluateTests(SimpleTestCase):
    def test_ungated_paths_pass_without_reading_the_token(self):
        for path in ("/", "/api/posts", "/auth", "/admin/"):
            decision = gateway.evaluate(path, "garbage", prefixes=PREFIXES)
            self.assertEqual(decision.action, gateway.PASS, path)
            self.assertIsNone(decision.identity)

    def test_missing_token_redirects_to_login_with_return_path(self):
        decision = gateway.evaluate("/create", None, prefixes=PREFIXES)
        self.assertEqual(decision.action, gateway.REDIRECT)
        path, query = _query(decision.location)
        self.assertEqual(path, "/auth")
        self.assertEqual(query, {"redirect": "/create", "error": "authentication_required"})
        self.assertFalse(decision.clear_token)

    def test_invalid_token_redirects_and_clears(self):
        decision = gateway.evaluate("/post/4/edit", "not-a-token", prefixes=PREFIXES)
        self.assertEqual(decision.action, gateway.REDIRECT)
        path, query = _query(decision.location)
        self.assertEqual(path, "/auth")
        self.assertEqual(query["redirect"], "/post/4/edit")
        self.assertEqual(query["error"], "invalid_token")
        self.assertEqual(query["message"], "Please login again")
        self.assertTrue(decision.clear_token)

    def test_expired_token_is_treated_as_invalid(self):
        issued_at = timezone.now()
        raw = tokens.issue(1, "head@dept.edu", "ADMIN", issued_at=issued_at)
        decision = gateway.evaluate("/create", raw, now=issued_at + timedelta(days=7), prefixes=PREFIXES)
        self.assertEqual(decision.reason, gateway.REASON_INVALID_TOKEN)
        self.assertTrue(decision.clear_token)

    def test_user_role_redirects_home(self):
        raw = tokens.issue(2, "student@dept.edu", "USER")
        decision = gateway.evaluate("/create", raw, prefixes=PREFIXES)
        self.assertEqual(decision.action, gateway.REDIRECT)
        path, query = _query(decision.location)
        self.assertEqual(path, "/")
        self.assertEqual(query, {"error": "unauthorized", "message": "Admin access required"})
        self.assertFalse(decision.clear_token)

    def test_admin_is_admitted_with_identity(self):
        raw = tokens.issue(1, "head@dept.edu", "ADMIN")
        decision = gateway.evaluate("/post/9", raw, prefixes=PREFIXES)
        self.assertEqual(decision.action, gateway.ADMIT)
        self.assertEqual(decision.identity.account_id, 1)
        self.assertEqual(decision.identity.role, "ADMIN")

    def test_is_gated_uses_prefixes(self):
        self.assertTrue(gateway.is_gated("/create/", PREFIXES))
        self.assertTrue(gateway.is_gated("/post/1/edit/", PREFIXES))
        self.assertFalse(gateway.is_gated("/api/posts/create", PREFIXES))


@override_settings(PORTAL_LOGIN_URL="/auth", PORTAL_HOME_URL="/", PORTAL_ADMIN_GATED_PREFIXES=PREFIXES)
class AdminGateMiddlewareTests(TestCase):
    def setUp(self):
        self.post = Post.objects.create(
            title="Hackathon", content="<p>Join</p>", tags=["coding"], department="Computer Engineering"
        )
        self.admin_token = tokens.issue(1, "head@dept.edu", "ADMIN")
        self.user_token = tokens.issue(2, "student@dept.edu", "USER")

    def test_anonymous_create_page_redirects_to_login(self):
        r = self.client.get("/create/")
        self.assertEqual(r.status_code, 302)
        path, query = _query(r["Location"])
        self.assertEqual(path, "/auth")
        self.assertEqual(query["redirect"], "/create/")
        self.assertEqual(query["error"], "authentication_required")

    def test_invalid_cookie_is_deleted(self):
        self.client.cookies["authToken"] = "tampered"
        r = self.client.get("/post/%d/" % self.post.pk)
        self.assertEqual(r.status_code, 302)
        self.assertIn("authToken", r.cookies)
        self.assertEqual(r.cookies["authToken"].value, "")
        self.assertEqual(r.cookies["authToken"]["max-age"], 0)

    def test_user_cookie_redirects_home(self):
        self.client.cookies["authToken"] = self.user_token
        r = self.client.get("/post/%d/edit/" % self.post.pk)
        self.assertEqual(r.status_code, 302)
        path, query = _query(r["Location"])
        self.assertEqual(path, "/")
        self.assertEqual(query["error"], "unauthorized")

    def test_admin_cookie_reaches_create_page(self):
        self.client.cookies["authToken"] = self.admin_token
        r = self.client.get("/create/")
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["viewer"], {"id": 1, "email": "head@dept.edu", "role": "ADMIN"})
        self.assertEqual(body["tags"], ["coding"])
        self.assertEqual(body["departments"], ["Computer Engineering"])

    def test_admin_bearer_header_reaches_post_page(self):
        r = self.client.get("/post/%d/" % self.post.pk, HTTP_AUTHORIZATION=f"Bearer {self.admin_token}")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["post"]["id"], self.post.pk)

    def test_ungated_api_path_is_untouched(self):
        r = self.client.get("/api/posts")
        self.assertEqual(r.status_code, 200)
