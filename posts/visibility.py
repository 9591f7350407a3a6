"""
posts/visibility.py — Who may see which post

- ADMIN sees every post.
- Everyone else (USER or anonymous) sees a post only while
  `deadline is None or deadline > now`. The boundary is exclusive: at the
  deadline instant the post is already hidden.

This runs on the fetched result set, after the Filter Engine query. `now` is
read once per call so every post in a batch is judged against the same
instant.
"""
from django.utils import timezone

from users.models import Role


def is_open(post, now) -> bool:
    return post.deadline is None or post.deadline > now


def is_visible(post, role, now=None) -> bool:
    if role == Role.ADMIN:
        return True
    return is_open(post, now or timezone.now())


def visible_posts(posts, role, now=None) -> list:
    posts = list(posts)
    if role == Role.ADMIN:
        return posts
    now = now or timezone.now()
    return [post for post in posts if is_open(post, now)]


def deadline_stats(posts, now=None) -> dict:
    """Counts for the dashboard cards: open vs. past-deadline posts."""
    now = now or timezone.now()
    total = active = 0
    for post in posts:
        total += 1
        if is_open(post, now):
            active += 1
    return {"active": active, "expired": total - active, "total": total}
