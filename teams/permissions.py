from rest_framework.permissions import BasePermission


def is_teams_admin(user) -> bool:
    if not user or not user.is_authenticated:
        return False
    return bool(getattr(user, "is_teams_admin", False))


class IsTeamsAdmin(BasePermission):
    """
    Administrator endpoints (merge, leadership, random pool, scores).
    """
    message = "Administrator access required."

    def has_permission(self, request, view):
        return is_teams_admin(request.user)
