"""
posts/urls.py

Feed, stats, detail and admin write endpoints.
Include this under the global /api/ prefix. Trailing slashes are optional
because existing clients call these paths both ways.
"""
from django.urls import re_path

from .views import PostDeleteView, PostDetailView, PostFeedView, PostStatsView, PostWriteView


app_name = "posts"

urlpatterns = [
    re_path(r"^posts/?$", PostFeedView.as_view(), name="post-feed"),
    re_path(r"^posts/stats/?$", PostStatsView.as_view(), name="post-stats"),
    re_path(r"^posts/create/?$", PostWriteView.as_view(), name="post-write"),
    re_path(r"^posts/delete/?$", PostDeleteView.as_view(), name="post-delete"),
    re_path(r"^posts/(?P<pk>\d+)/?$", PostDetailView.as_view(), name="post-detail"),
]
