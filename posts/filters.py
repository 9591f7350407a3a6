"""
posts/filters.py — Feed filtering & facet values

Query params (all optional, all AND-ed together):
- searchTerm=<text>  case-insensitive match in title OR content OR excerpt
- department=<name>  exact match; "All" or empty means no filter
- tag=<tag>          post.tags contains exactly this tag; "All" or empty means no filter
- minCGPA=<number>   the *reader's* CGPA: keep posts with no threshold OR threshold <= it;
                     0 means "not given", like a cgpa of 0 on a post

searchTerm and minCGPA are each an OR group of their own. Each group is built
as its own Q object and then AND-ed, so supplying both never lets one OR
group overwrite or absorb the other.

Results are newest first. There is no pagination.
"""
from django.db import connection
from django.db.models import Q
from django_filters import rest_framework as dj_filters
from rest_framework.exceptions import ValidationError

from .models import Post

ALL = "All"


def _is_unset(value) -> bool:
    return value in (None, "") or value == ALL


class PostFilter(dj_filters.FilterSet):
    searchTerm = dj_filters.CharFilter(method="filter_search")
    department = dj_filters.CharFilter(method="filter_department")
    tag = dj_filters.CharFilter(method="filter_tag")
    minCGPA = dj_filters.NumberFilter(method="filter_min_cgpa")

    class Meta:
        model = Post
        fields = ["searchTerm", "department", "tag", "minCGPA"]

    def filter_search(self, queryset, name, value):
        term = value.strip()
        if not term:
            return queryset
        return queryset.filter(
            Q(title__icontains=term) | Q(content__icontains=term) | Q(excerpt__icontains=term)
        )

    def filter_department(self, queryset, name, value):
        if _is_unset(value):
            return queryset
        return queryset.filter(department=value)

    def filter_tag(self, queryset, name, value):
        if _is_unset(value):
            return queryset
        if connection.features.supports_json_field_contains:
            return queryset.filter(tags__contains=[value])
        # SQLite/Oracle can't do JSON containment; check membership exactly in Python.
        matching = [pk for pk, tags in queryset.values_list("pk", "tags") if value in (tags or [])]
        return queryset.filter(pk__in=matching)

    def filter_min_cgpa(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(Q(cgpa__isnull=True) | Q(cgpa__lte=value))


def filter_posts(params, queryset=None):
    """Apply PostFilter to `params` (a QueryDict or dict). Raises ValidationError on bad input."""
    queryset = Post.objects.all() if queryset is None else queryset
    filterset = PostFilter(data=params, queryset=queryset)
    if not filterset.is_valid():
        raise ValidationError(filterset.errors)
    return filterset.qs.order_by("-created_at", "-id")


def facet_values(queryset=None):
    """Distinct tags and distinct non-blank departments, for populating filter controls."""
    queryset = Post.objects.all() if queryset is None else queryset

    tags = set()
    for post_tags in queryset.values_list("tags", flat=True):
        tags.update(t for t in (post_tags or []) if isinstance(t, str) and t)

    departments = set(
        queryset.exclude(department__isnull=True)
        .exclude(department="")
        .values_list("department", flat=True)
    )

    return {
        "tags": sorted(tags, key=str.lower),
        "departments": sorted(departments, key=str.lower),
    }
