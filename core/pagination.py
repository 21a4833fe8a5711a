"""
Limit/offset paging for list endpoints that report ``total``/``has_more``.
"""
from django.conf import settings
from rest_framework.exceptions import ValidationError


def page_params(request):
    """Read and clamp ``limit``/``offset`` query parameters."""
    conf = settings.DASHBOARD_SETTINGS
    try:
        limit = int(request.query_params.get('limit', conf['DEFAULT_PAGE_SIZE']))
        offset = int(request.query_params.get('offset', 0))
    except (TypeError, ValueError):
        raise ValidationError('limit and offset must be integers')

    limit = max(1, min(limit, conf['MAX_PAGE_SIZE']))
    offset = max(0, offset)
    return limit, offset


def paginate(request, queryset, serializer_class, key):
    """
    Slice ``queryset`` and build ``{key: [...], 'total', 'has_more'}``.
    """
    limit, offset = page_params(request)
    total = queryset.count()
    page = queryset[offset:offset + limit]
    return {
        key: serializer_class(page, many=True).data,
        'total': total,
        'has_more': offset + limit < total,
        'limit': limit,
        'offset': offset,
    }
