"""
Tests for the deadline visibility policy (posts.visibility). Pure functions,
so plain objects stand in for posts.
"""
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from django.test import SimpleTestCase

from posts.visibility import deadline_stats, is_visible, visible_posts

NOW = datetime(2025, 9, 20, 12, 0, tzinfo=timezone.utc)


def _post(name, deadline):
    return SimpleNamespace(name=name, deadline=deadline)


class VisibilityTests(SimpleTestCase):
    def setUp(self):
        self.open_ended = _post("open", None)
        self.future = _post("future", NOW + timedelta(days=2))
        self.past = _post("past", NOW - timedelta(seconds=1))
        self.boundary = _post("boundary", NOW)
        self.posts = [self.open_ended, self.future, self.past, self.boundary]

    def test_admin_sees_everything_in_order(self):
        self.assertEqual(visible_posts(self.posts, "ADMIN", now=NOW), self.posts)

    def test_user_and_anonymous_see_only_open_posts(self):
        for role in ("USER", None):
            self.assertEqual(
                [p.name for p in visible_posts(self.posts, role, now=NOW)], ["open", "future"]
            )

    def test_deadline_equal_to_now_is_hidden(self):
        self.assertFalse(is_visible(self.boundary, "USER", now=NOW))
        self.assertTrue(is_visible(self.boundary, "ADMIN", now=NOW))

    def test_every_visible_post_is_open(self):
        for post in visible_posts(self.posts, "USER", now=NOW):
            self.assertTrue(post.deadline is None or post.deadline > NOW)

    def test_deadline_stats(self):
        self.assertEqual(deadline_stats(self.posts, now=NOW), {"active": 2, "expired": 2, "total": 4})
        self.assertEqual(deadline_stats([], now=NOW), {"active": 0, "expired": 0, "total": 0})
