"""
posts/admin.py

Minimal admin for quick manual curation of department posts.
"""
from django.contrib import admin
from .models import Post


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ("title", "department", "cgpa", "deadline", "created_at")
    list_filter = ("department", "deadline")
    search_fields = ("title", "content", "excerpt", "department")
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "updated_at")
