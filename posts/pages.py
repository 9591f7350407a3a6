"""
posts/pages.py — Data for the admin-only editor pages

These back the /create/ and /post/<id>/ (edit) screens. They are plain Django
views, not API views: the AdminGateMiddleware (users.gateway) has already
verified the caller and set `request.portal_identity` before they run, so
there is no DRF authentication here.

Each page answers with the JSON the editor needs to render:
- /create/            → viewer + tag/department suggestions
- /post/<id>/         → viewer + the post
- /post/<id>/edit/    → viewer + the post (prefill)
"""
from django.core.exceptions import PermissionDenied
from django.http import Http404, JsonResponse
from django.views.decorators.http import require_GET

from .filters import facet_values
from .models import Post
from .serializers import PostSerializer


def _viewer(request):
    identity = getattr(request, "portal_identity", None)
    if identity is None:
        # Gate not configured for this path; refuse rather than render.
        raise PermissionDenied("Admin access required")
    return identity.as_dict()


@require_GET
def create_page(request):
    viewer = _viewer(request)
    return JsonResponse({"viewer": viewer, **facet_values()})


@require_GET
def post_page(request, pk):
    viewer = _viewer(request)
    post = Post.objects.filter(pk=pk).first()
    if post is None:
        raise Http404("Post not found")
    return JsonResponse({"viewer": viewer, "post": PostSerializer(post).data})
