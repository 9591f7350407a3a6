"""
posts/serializers.py

DRF serializers that define the JSON shapes of a post.
Keep these thin and explicit; they are our API contract.

- PostSerializer       → what readers get (camelCase timestamps).
- PostWriteSerializer  → the single create/update contract used by
                         POST and PUT /api/posts/create.
- PostIdSerializer     → `{id}` bodies (PUT target, DELETE).
"""
from rest_framework import serializers

from .models import Post


class PostSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Post
        fields = [
            "id",
            "title",
            "content",
            "excerpt",
            "tags",
            "department",
            "cgpa",
            "deadline",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class PostIdSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)


# What an omitted optional field becomes on a full-record replace (PUT).
REPLACE_DEFAULTS = {
    "content": "",
    "excerpt": None,
    "tags": [],
    "department": None,
    "cgpa": None,
    "deadline": None,
}


LEGACY_FIELD_NAMES = {
    "CGPA": "cgpa",
    "LastSubmittedAt": "deadline",
}


class PostWriteSerializer(serializers.ModelSerializer):
    tags = serializers.ListField(
        child=serializers.CharField(allow_blank=True, max_length=50),
        required=False,
        default=list,
    )
    isDraft = serializers.BooleanField(required=False, default=False, write_only=True)

    class Meta:
        model = Post
        fields = ["title", "content", "excerpt", "tags", "department", "cgpa", "deadline", "isDraft"]
        extra_kwargs = {
            "content": {"required": False, "allow_blank": True, "trim_whitespace": False},
            "excerpt": {"required": False, "allow_null": True, "allow_blank": True},
            "department": {"required": False, "allow_null": True, "allow_blank": True},
            "cgpa": {"required": False, "allow_null": True},
            "deadline": {"required": False, "allow_null": True},
        }

    def to_internal_value(self, data):
        # Older clients send CGPA / LastSubmittedAt; the current name wins when both are present.
        legacy = [old for old in LEGACY_FIELD_NAMES if old in data]
        if legacy:
            data = data.copy()
            for old in legacy:
                value = data.pop(old)
                if isinstance(value, list) and hasattr(data, "getlist"):
                    value = value[-1] if value else None
                data.setdefault(LEGACY_FIELD_NAMES[old], value)
        return super().to_internal_value(data)

    def validate_excerpt(self, value):
        return (value or "").strip() or None

    def validate_department(self, value):
        return (value or "").strip() or None

    def validate_tags(self, value):
        # Trim, drop blanks, suppress duplicates (first occurrence wins).
        seen = []
        for tag in value or []:
            tag = tag.strip()
            if tag and tag not in seen:
                seen.append(tag)
        return seen

    def validate_cgpa(self, value):
        # 0 is how the form says "no threshold".
        if value == 0:
            return None
        return value

    def validate(self, attrs):
        is_draft = attrs.pop("isDraft", False)
        if not is_draft and not (attrs.get("content") or "").strip():
            raise serializers.ValidationError({"content": ["Content is required for published posts."]})
        return attrs

    def update(self, instance, validated_data):
        for attr, value in {**REPLACE_DEFAULTS, **validated_data}.items():
            setattr(instance, attr, value)
        # force_update: a post deleted mid-edit must not be re-inserted.
        instance.save(force_update=True)
        return instance
