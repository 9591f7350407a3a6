"""
posts/models.py

Data model for:
- Post: a departmental announcement (rich-text body plus eligibility metadata)

Notes & design choices
----------------------
- content is stored as the HTML produced by the editor; it may only be empty
  for drafts, which the write serializer enforces.
- tags is a JSONField (ordered list of strings) for simple faceting.
- cgpa is the minimum CGPA a reader needs; NULL means "no threshold". The
  input layer turns a submitted 0 into NULL.
- deadline is the submission deadline; non-admins stop seeing a post once it
  has passed (see posts.visibility).
- No author column and no version column: any admin may edit or delete any
  post, and the last write wins.
"""
from django.core.validators import MinValueValidator
from django.db import models


class Post(models.Model):
    title = models.CharField(max_length=255, help_text="Headline shown on the card.")
    content = models.TextField(blank=True, default="", help_text="Rich text (HTML).")
    excerpt = models.TextField(null=True, blank=True, help_text="Short summary for the feed (optional).")
    tags = models.JSONField(default=list, blank=True, help_text="List of strings, e.g. ['hackathon','coding']")
    department = models.CharField(max_length=120, null=True, blank=True, db_index=True)
    cgpa = models.FloatField(
        null=True, blank=True,
        validators=[MinValueValidator(0)],
        help_text="Minimum CGPA to be eligible; empty means open to everyone.",
    )
    deadline = models.DateTimeField(null=True, blank=True, db_index=True, help_text="Last moment to apply/submit.")
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"{self.department or 'General'}: {self.title}"
