from rest_framework import permissions

from .models import Role


class IsPortalAdmin(permissions.BasePermission):
    """Authenticated caller whose token carries role ADMIN."""
    message = "Admin access required"

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and getattr(user, "role", None) == Role.ADMIN
        )


def caller_role(request):
    """Role of the (possibly anonymous) caller, or None."""
    user = getattr(request, "user", None)
    if not user or not user.is_authenticated:
        return None
    return getattr(user, "role", None)
