"""
Management command: seed_posts
------------------------------

Load sample department posts, either the built-in engineering samples or a
JSON file (a list of objects, or {"results": [...]}) with the keys
title, content, excerpt, tags, department, cgpa, deadline (ISO 8601).

Rows are matched on (title, department), so running it twice creates nothing
new. --clear wipes every post first.

Usage:
    python manage.py seed_posts
    python manage.py seed_posts path/to/posts.json --clear
"""
import json
from datetime import timedelta, timezone as dt_timezone
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.db.models import Count
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from posts.models import Post

# Deadlines are days from "now" so fresh seeds are visible to students.
SAMPLE_POSTS = [
    {
        "title": "Mechanical Engineering: Robotics Lab Upgrade",
        "content": (
            "<h2>Robotics Lab Upgrade Announcement</h2>"
            "<p>The robotics lab now has industrial robot arms and automation kits "
            "available for coursework and research.</p>"
            "<ul><li>New robotic arms</li><li>PLC and automation training modules</li>"
            "<li>Open lab hours for project work</li></ul>"
        ),
        "excerpt": "Robotics lab upgraded with new industrial robots and automation kits.",
        "tags": ["mechanical", "robotics", "lab", "automation", "upgrade"],
        "department": "Mechanical Engineering",
        "deadline_days": 20,
        "cgpa": 7.0,
    },
    {
        "title": "Civil Engineering: Bridge Design Competition",
        "content": (
            "<h2>Annual Bridge Design Competition</h2>"
            "<p>Teams design and build model bridges judged on strength, efficiency "
            "and innovation.</p>"
            "<ul><li>Materials provided by the department</li><li>Prizes for the top 3 teams</li></ul>"
        ),
        "excerpt": "Bridge design competition with prizes for innovative student teams.",
        "tags": ["civil", "competition", "bridge", "design", "event"],
        "department": "Civil Engineering",
        "deadline_days": 30,
        "cgpa": 6.5,
    },
    {
        "title": "Electrical Engineering: IoT Workshop Series",
        "content": (
            "<h2>IoT Workshop Series</h2>"
            "<p>Three weeks on sensor integration, wireless protocols and cloud platforms.</p>"
        ),
        "excerpt": "IoT workshops covering sensors, wireless and cloud platforms.",
        "tags": ["electrical", "iot", "workshop", "sensors", "cloud"],
        "department": "Electrical Engineering",
        "deadline_days": 14,
        "cgpa": 7.2,
    },
    {
        "title": "Computer Engineering: Hackathon",
        "content": (
            "<h2>Hackathon: Code for Change</h2>"
            "<p>Build apps and systems for smart campuses and sustainability. Winners "
            "receive internships and cash prizes.</p>"
        ),
        "excerpt": "Hackathon focused on smart campus and sustainability solutions.",
        "tags": ["computer", "hackathon", "smart-campus", "sustainability", "coding"],
        "department": "Computer Engineering",
        "deadline_days": 10,
        "cgpa": 7.8,
    },
    {
        "title": "Electronics Engineering: VLSI Design Seminar",
        "content": (
            "<h2>VLSI Design Seminar</h2>"
            "<p>Guest speakers from semiconductor companies on VLSI trends, EDA "
            "tools and careers.</p>"
        ),
        "excerpt": "VLSI seminar with industry experts and career guidance.",
        "tags": ["electronics", "vlsi", "seminar", "industry", "career"],
        "department": "Electronics Engineering",
        "deadline_days": 25,
        "cgpa": 7.4,
    },
]


def _builtin_items():
    now = timezone.now()
    items = []
    for sample in SAMPLE_POSTS:
        item = {k: v for k, v in sample.items() if k != "deadline_days"}
        item["deadline"] = now + timedelta(days=sample["deadline_days"])
        items.append(item)
    return items


def _parse_deadline(value):
    if value in (None, ""):
        return None
    parsed = parse_datetime(value)
    if parsed is None:
        raise CommandError(f"Unparseable deadline: {value!r}")
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


class Command(BaseCommand):
    help = "Seed Post rows from a JSON file, or the built-in engineering samples."

    def add_arguments(self, parser):
        parser.add_argument("json_path", nargs="?", type=str, help="Path to posts JSON (optional)")
        parser.add_argument("--clear", action="store_true", help="Delete all existing posts first")

    def handle(self, *args, **opts):
        if opts["json_path"]:
            path = Path(opts["json_path"])
            if not path.exists():
                raise CommandError(f"File not found: {path}")
            data = json.loads(path.read_text(encoding="utf-8"))
            items = data if isinstance(data, list) else data.get("results", [])
            for x in items:
                x["deadline"] = _parse_deadline(x.get("deadline"))
        else:
            items = _builtin_items()

        created = 0
        with transaction.atomic():
            if opts["clear"]:
                deleted, _ = Post.objects.all().delete()
                self.stdout.write(f"Cleared {deleted} existing post(s).")
            for x in items:
                if not x.get("title"):
                    raise CommandError("Every post needs a title.")
                _, made = Post.objects.get_or_create(
                    title=x["title"],
                    department=x.get("department") or None,
                    defaults=dict(
                        content=x.get("content", "") or "",
                        excerpt=x.get("excerpt") or None,
                        tags=x.get("tags", []) or [],
                        cgpa=x.get("cgpa") or None,
                        deadline=x.get("deadline"),
                    ),
                )
                created += 1 if made else 0

        self.stdout.write(self.style.SUCCESS(f"Seeded {created} post(s)."))
        totals = (
            Post.objects.values("department")
            .annotate(count=Count("id"))
            .order_by("department")
        )
        for row in totals:
            self.stdout.write(f"  {row['department'] or '(no department)'}: {row['count']}")
        self.stdout.write(f"Total posts: {Post.objects.count()}")
