import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Post",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(help_text="Headline shown on the card.", max_length=255)),
                ("content", models.TextField(blank=True, default="", help_text="Rich text (HTML).")),
                ("excerpt", models.TextField(blank=True, help_text="Short summary for the feed (optional).", null=True)),
                (
                    "tags",
                    models.JSONField(blank=True, default=list, help_text="List of strings, e.g. ['hackathon','coding']"),
                ),
                ("department", models.CharField(blank=True, db_index=True, max_length=120, null=True)),
                (
                    "cgpa",
                    models.FloatField(
                        blank=True,
                        help_text="Minimum CGPA to be eligible; empty means open to everyone.",
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "deadline",
                    models.DateTimeField(blank=True, db_index=True, help_text="Last moment to apply/submit.", null=True),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
