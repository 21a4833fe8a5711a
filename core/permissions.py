"""
Role checks for ADMIN and STAFF users.

``require_auth`` is the single gate every view passes through, either
directly or via the permission classes below. ADMIN satisfies any role
requirement; STAFF satisfies only STAFF.
"""
from rest_framework import permissions
from rest_framework.exceptions import NotAuthenticated, PermissionDenied

from .models import User


def require_auth(request, required_role=None):
    """
    Return the authenticated user or raise.

    Raises ``NotAuthenticated`` (401) when there is no valid session and
    ``PermissionDenied`` (403) when the user lacks ``required_role``.
    """
    user = getattr(request, 'user', None)
    if not (user and user.is_authenticated and user.is_active):
        raise NotAuthenticated('Authentication required')

    if required_role and user.role != required_role and user.role != User.Role.ADMIN:
        raise PermissionDenied('Insufficient permissions')

    return user


class IsAuthenticatedUser(permissions.BasePermission):
    """
    Any active ADMIN or STAFF user.
    """

    def has_permission(self, request, view):
        require_auth(request)
        return True


class IsStaffMember(permissions.BasePermission):
    """
    STAFF users, and ADMIN users who pass every role check.
    """

    def has_permission(self, request, view):
        require_auth(request, User.Role.STAFF)
        return True


class IsAdmin(permissions.BasePermission):
    """
    ADMIN users only.
    """

    def has_permission(self, request, view):
        require_auth(request, User.Role.ADMIN)
        return True
