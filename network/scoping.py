"""
Geographic scoping of staff-visible data.

Reads follow a district-first policy: a staff user assigned to a district
sees that district, otherwise one assigned to a province sees the whole
province, and an unassigned staff user sees everything. ADMIN users are
never filtered.

Writes are stricter: unassigned staff may not modify anything, and
assigned staff only inside their district or province.
"""
from django.db.models import Q

from core.models import User


# Lookup paths from each model to its district and province.
SCOPE_PATHS = {
    'town': ('district_id', 'district__province_id'),
    'router': ('town__district_id', 'town__district__province_id'),
    'alert': ('router__town__district_id', 'router__town__district__province_id'),
    'connected_user': ('router__town__district_id', 'router__town__district__province_id'),
}


def _bypasses_scope(user):
    return user.role == User.Role.ADMIN or not user.is_scoped


def scope_filter(user, kind):
    """
    Build the ``Q`` restricting ``kind`` querysets to ``user``'s scope.

    Returns an empty ``Q`` (no restriction) for ADMIN and unassigned staff.
    """
    if _bypasses_scope(user):
        return Q()

    district_path, province_path = SCOPE_PATHS[kind]
    if user.assigned_district_id:
        return Q(**{district_path: user.assigned_district_id})
    return Q(**{province_path: user.assigned_province_id})


def scope_queryset(queryset, user, kind):
    return queryset.filter(scope_filter(user, kind))


def scope_users(queryset, user):
    """
    Restrict a user queryset to people assigned inside ``user``'s scope.
    """
    if _bypasses_scope(user):
        return queryset

    if user.assigned_district_id:
        return queryset.filter(assigned_district_id=user.assigned_district_id)
    return queryset.filter(
        Q(assigned_province_id=user.assigned_province_id) |
        Q(assigned_district__province_id=user.assigned_province_id)
    )


def can_manage_town(user, town):
    """Whether ``user`` may move routers into or out of ``town``."""
    if user.role == User.Role.ADMIN:
        return True
    if town is None or not user.is_scoped:
        return False
    if user.assigned_district_id:
        return town.district_id == user.assigned_district_id
    return town.district.province_id == user.assigned_province_id


def can_manage_alert(user, alert):
    """Whether ``user`` may resolve or dismiss ``alert``."""
    if user.role == User.Role.ADMIN:
        return True
    return can_manage_town(user, alert.router.town)
