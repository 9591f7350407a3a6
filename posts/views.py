"""
posts/views.py

Endpoints:
- GET    /api/posts          feed (public) → {posts, tags, departments}
- GET    /api/posts/stats    open/past-deadline counts over all posts (public)
- GET    /api/posts/{id}     one post (public) or 404
- POST   /api/posts/create   create a post (ADMIN)
- PUT    /api/posts/create   replace a post, id in the body (ADMIN)
- DELETE /api/posts/delete   delete a post, id in the body (ADMIN)

Filtering (feed only, see posts.filters):
- searchTerm, department, tag, minCGPA

Visibility (feed, detail; see posts.visibility):
- ADMIN callers see everything; everyone else only posts whose deadline has
  not passed. The caller's role comes from the optional bearer token/cookie;
  an unverifiable token simply means "anonymous" on these public endpoints.

Write endpoints authenticate strictly (401 on a bad/missing token) and
require role ADMIN (403 otherwise).
"""
import logging

from django.db import DatabaseError
from django.utils import timezone
from rest_framework import permissions, status
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from rest_framework.views import APIView

from users.authentication import OptionalPortalTokenAuthentication, PortalTokenAuthentication
from users.permissions import IsPortalAdmin, caller_role

from .filters import facet_values, filter_posts
from .models import Post
from .serializers import PostIdSerializer, PostSerializer, PostWriteSerializer
from .visibility import deadline_stats, is_visible, visible_posts

# Swagger / OpenAPI
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------------- #
# Swagger helpers                                                               #
# ----------------------------------------------------------------------------- #
_param_search = openapi.Parameter(
    name="searchTerm", in_=openapi.IN_QUERY, type=openapi.TYPE_STRING,
    description="Case-insensitive text searched in title, content and excerpt"
)
_param_department = openapi.Parameter(
    name="department", in_=openapi.IN_QUERY, type=openapi.TYPE_STRING,
    description="Exact department name ('All' = no filter)"
)
_param_tag = openapi.Parameter(
    name="tag", in_=openapi.IN_QUERY, type=openapi.TYPE_STRING,
    description="Exact tag the post must carry ('All' = no filter)"
)
_param_min_cgpa = openapi.Parameter(
    name="minCGPA", in_=openapi.IN_QUERY, type=openapi.TYPE_NUMBER,
    description="Your CGPA: keeps posts without a threshold or with threshold ≤ this value"
)

FEED_SCHEMA = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        "posts": openapi.Schema(type=openapi.TYPE_ARRAY, items=openapi.Schema(type=openapi.TYPE_OBJECT)),
        "tags": openapi.Schema(type=openapi.TYPE_ARRAY, items=openapi.Schema(type=openapi.TYPE_STRING)),
        "departments": openapi.Schema(type=openapi.TYPE_ARRAY, items=openapi.Schema(type=openapi.TYPE_STRING)),
    },
)
STATS_SCHEMA = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        "active": openapi.Schema(type=openapi.TYPE_INTEGER),
        "expired": openapi.Schema(type=openapi.TYPE_INTEGER),
        "total": openapi.Schema(type=openapi.TYPE_INTEGER),
    },
)
WRITE_RESULT_SCHEMA = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        "success": openapi.Schema(type=openapi.TYPE_BOOLEAN),
        "post": openapi.Schema(type=openapi.TYPE_OBJECT),
    },
)


# ----------------------------------------------------------------------------- #
# Public reads                                                                  #
# ----------------------------------------------------------------------------- #
class PostFeedView(APIView):
    authentication_classes = [OptionalPortalTokenAuthentication]
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(
        tags=["Posts"],
        operation_description=(
            "List posts, newest first, plus the tag/department values for the filter controls.\n\n"
            "Non-admin callers only get posts whose deadline has not passed."
        ),
        manual_parameters=[_param_search, _param_department, _param_tag, _param_min_cgpa],
        responses={200: openapi.Response("OK", FEED_SCHEMA), 400: "Validation failed"},
    )
    def get(self, request):
        queryset = filter_posts(request.query_params)
        posts = visible_posts(queryset, caller_role(request), now=timezone.now())
        return Response({"posts": PostSerializer(posts, many=True).data, **facet_values()})


class PostStatsView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(
        tags=["Posts"],
        operation_description="Counts of open vs. past-deadline posts across all posts (the same for every caller).",
        responses={200: openapi.Response("OK", STATS_SCHEMA)},
    )
    def get(self, request):
        return Response(deadline_stats(Post.objects.only("deadline")))


class PostDetailView(APIView):
    authentication_classes = [OptionalPortalTokenAuthentication]
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(
        tags=["Posts"],
        operation_description="Retrieve a single post by ID.",
        responses={200: openapi.Response("OK", PostSerializer()), 404: "Post not found"},
    )
    def get(self, request, pk):
        post = Post.objects.filter(pk=pk).first()
        if post is None or not is_visible(post, caller_role(request)):
            raise NotFound("Post not found")
        return Response(PostSerializer(post).data)


# ----------------------------------------------------------------------------- #
# Admin writes                                                                  #
# ----------------------------------------------------------------------------- #
class PostWriteView(APIView):
    authentication_classes = [PortalTokenAuthentication]
    permission_classes = [IsPortalAdmin]

    @swagger_auto_schema(
        tags=["Posts"],
        operation_description=(
            "Create a post (ADMIN).\n\n"
            "- `content` is required unless `isDraft` is true\n"
            "- `cgpa: 0` is stored as no threshold\n"
            "- duplicate tags are dropped"
        ),
        request_body=PostWriteSerializer,
        responses={
            201: openapi.Response("Created", WRITE_RESULT_SCHEMA),
            400: "Validation failed",
            401: "Unauthorized",
            403: "Admin access required",
        },
    )
    def post(self, request):
        ser = PostWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        post = ser.save()
        logger.info("Post %s created by account %s", post.pk, request.user.pk)
        return Response(
            {
                "success": True,
                "post": {
                    "id": post.id,
                    "title": post.title,
                    "createdAt": PostSerializer(post).data["createdAt"],
                },
            },
            status=status.HTTP_201_CREATED,
        )

    @swagger_auto_schema(
        tags=["Posts"],
        operation_description=(
            "Replace a post (ADMIN). The body carries `id` plus the full record; "
            "optional fields left out are cleared."
        ),
        request_body=PostWriteSerializer,
        responses={
            200: openapi.Response("Updated", WRITE_RESULT_SCHEMA),
            400: "Validation failed",
            401: "Unauthorized",
            403: "Admin access required",
            404: "Post not found",
        },
    )
    def put(self, request):
        id_ser = PostIdSerializer(data=request.data)
        id_ser.is_valid(raise_exception=True)
        pk = id_ser.validated_data["id"]

        post = Post.objects.filter(pk=pk).first()
        if post is None:
            raise NotFound("Post not found")

        ser = PostWriteSerializer(post, data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            post = ser.save()
        except DatabaseError:
            # Deleted between the lookup and the write.
            if not Post.objects.filter(pk=pk).exists():
                raise NotFound("Post not found")
            raise
        logger.info("Post %s updated by account %s", post.pk, request.user.pk)
        return Response(
            {
                "success": True,
                "post": {
                    "id": post.id,
                    "title": post.title,
                    "updatedAt": PostSerializer(post).data["updatedAt"],
                },
            },
            status=status.HTTP_200_OK,
        )


class PostDeleteView(APIView):
    authentication_classes = [PortalTokenAuthentication]
    permission_classes = [IsPortalAdmin]

    @swagger_auto_schema(
        tags=["Posts"],
        operation_description="Delete a post by `id` in the body (ADMIN).",
        request_body=PostIdSerializer,
        responses={200: "Deleted", 400: "Validation failed", 401: "Unauthorized", 403: "Admin access required", 404: "Post not found"},
    )
    def delete(self, request):
        ser = PostIdSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        pk = ser.validated_data["id"]

        deleted, _ = Post.objects.filter(pk=pk).delete()
        if not deleted:
            raise NotFound("Post not found")
        logger.info("Post %s deleted by account %s", pk, request.user.pk)
        return Response({"success": True, "message": "Post deleted successfully"}, status=status.HTTP_200_OK)
