"""
posts/apps.py

AppConfig for the Posts app.

Why this app exists
-------------------
Department posts are the portal's content: admins publish announcements
(internships, hackathons, scholarships) and students browse them.

1) /api/posts/            — the filterable feed plus facet values
2) /api/posts/create|delete — admin-only writes
3) /create/, /post/<id>/  — admin pages behind the gateway middleware
"""
from django.apps import AppConfig


class PostsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "posts"
    verbose_name = "Department Posts"
