"""
urls.py — Root URL configuration for the Department Board backend

Purpose
===============================================================================
- Wire Django admin, the posts API and the login/logout endpoints.
- Hand the browser-facing entry points ("/", "/auth") to the frontend.
- Serve the admin-only editor pages (/create/, /post/<id>/...), which sit
  behind users.gateway.AdminGateMiddleware.
- Provide interactive API docs:
    * /api/docs/   → Swagger UI
    * /api/schema/ → OpenAPI JSON (machine-readable)

Notes
- "/" and "/auth" keep their query string when redirecting, so the gate's
  ?redirect=/error=/message= hints reach the frontend's login and home pages.
- Auth endpoints accept the path with or without a trailing slash.
"""

from django.conf import settings
from django.contrib import admin
from django.shortcuts import redirect
from django.urls import include, path, re_path
from rest_framework import permissions

from posts import pages
from users.auth_views import LoginView, LogoutView


def _frontend_redirect(request, suffix=""):
    target = settings.FRONTEND_URL.rstrip("/") + "/" + suffix
    query = request.META.get("QUERY_STRING", "")
    return redirect(f"{target}?{query}" if query else target)


# ----------------------------------------------------------------------------- #
# API Docs (Swagger/OpenAPI via drf-yasg)                                       #
# ----------------------------------------------------------------------------- #
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

schema_view = get_schema_view(
    openapi.Info(
        title="Department Board API",
        default_version="v1",
        description=(
            "Interactive API documentation for the Department Board. "
            "Auth uses a JWT session token (Bearer header or authToken cookie). "
            "Click 'Authorize' and paste: Bearer <TOKEN>. "
            "Key endpoints: /api/user/login, /api/posts, /api/posts/create, /api/posts/delete"
        ),
        contact=openapi.Contact(email="support@deptboard.example"),
    ),
    public=True,
    permission_classes=[permissions.AllowAny],
)

# ----------------------------------------------------------------------------- #
# URL Patterns                                                                  #
# ----------------------------------------------------------------------------- #
urlpatterns = [
    # browser entry points live on the FE (configurable per env)
    path("", lambda r: _frontend_redirect(r), name="root-redirect"),
    re_path(r"^auth/?$", lambda r: _frontend_redirect(r, "auth"), name="login-redirect"),

    path("admin/", admin.site.urls),

    # Auth
    re_path(r"^api/user/login/?$",  LoginView.as_view(),  name="user-login"),
    re_path(r"^api/user/logout/?$", LogoutView.as_view(), name="user-logout"),

    # API docs
    path("api/docs/",   schema_view.with_ui("swagger", cache_timeout=0), name="api-docs-swagger"),
    path("api/schema/", schema_view.without_ui(cache_timeout=0),         name="openapi-schema"),

    # Posts
    path("api/", include("posts.urls", namespace="posts")),

    # Admin-only editor pages (gated by middleware)
    path("create/",               pages.create_page, name="create-page"),
    path("post/<int:pk>/",        pages.post_page,   name="post-page"),
    path("post/<int:pk>/edit/",   pages.post_page,   name="post-edit-page"),
]
