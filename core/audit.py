"""
Audit trail helpers.

Every state-changing operation appends a ``Log`` row naming the acting
user, an upper-case action string and a human-readable detail line.
"""
import logging

from django.core.exceptions import ValidationError
from django.core.validators import validate_ipv46_address

from .models import Log

logger = logging.getLogger(__name__)


def _valid_ip(value):
    value = (value or '').strip()
    try:
        validate_ipv46_address(value)
    except ValidationError:
        return None
    return value


def get_client_ip(request):
    """
    Extract client IP address from request.

    The first ``X-Forwarded-For`` hop wins when it is a valid address;
    otherwise ``REMOTE_ADDR`` is used. Anything unparseable yields ``None``.
    """
    if request is None:
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = _valid_ip(x_forwarded_for.split(',')[0])
        if ip:
            return ip
    return _valid_ip(request.META.get('REMOTE_ADDR'))


def log_activity(user, action, details='', request=None):
    """
    Append an audit entry for ``user``.

    When ``request`` is given, the client address and user agent are
    recorded alongside the action.
    """
    entry = Log.objects.create(
        user=user,
        action=action,
        details=details,
        ip_address=get_client_ip(request),
        user_agent=request.META.get('HTTP_USER_AGENT', '') if request is not None else '',
    )
    logger.info(f"{action} by {user.email}: {details}")
    return entry
