"""
Dashboard API views for NetAdmin.

Provides endpoints for summary statistics, chart data, bandwidth
utilisation and the recent activity log.
"""
import logging

from django.db import OperationalError
from django.db.models import Sum
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from core.filters import LogFilter, apply_filterset
from core.mixins import DB_TIMEOUT_WARNING
from core.models import Log
from core.pagination import paginate
from core.permissions import IsAdmin, IsAuthenticatedUser
from core.serializers import LogSerializer
from network.models import Router
from network.services import active_devices
from .stats import (
    CHART_CACHE_KEY,
    EMPTY_STATS,
    STATS_CACHE_KEY,
    clear_stats,
    compute_chart_data,
    compute_dashboard_stats,
    get_or_compute,
    last_good,
)

logger = logging.getLogger(__name__)


def _stats_response():
    try:
        data, cached, age = get_or_compute(STATS_CACHE_KEY, compute_dashboard_stats)
    except OperationalError as e:
        logger.warning(f"Stats query failed, serving fallback: {e}")
        stale, age = last_good(STATS_CACHE_KEY)
        payload = dict(stale if stale is not None else EMPTY_STATS)
        payload.update({
            'warning': DB_TIMEOUT_WARNING,
            'cached': True,
            'cache_age': round(age, 1) if age is not None else None,
        })
        return Response(payload)

    payload = dict(data)
    payload.update({
        'cached': cached,
        'cache_age': round(age, 1),
        'last_updated': timezone.now().isoformat(),
    })
    return Response(payload)


@api_view(['GET'])
@permission_classes([IsAuthenticatedUser])
def dashboard_stats(request):
    """
    Get dashboard summary statistics.
    """
    return _stats_response()


@api_view(['GET'])
@permission_classes([IsAdmin])
def admin_stats(request):
    """Dashboard summary statistics for the admin console."""
    return _stats_response()


@api_view(['POST'])
@permission_classes([IsAdmin])
def refresh_stats(request):
    """
    Drop cached stats and chart data so the next read recomputes them.
    """
    clear_stats()
    return Response({'message': 'Stats cache cleared'})


@api_view(['GET'])
@permission_classes([IsAdmin])
def chart_data(request):
    """
    Get router status counts per province and overall.
    """
    try:
        data, cached, age = get_or_compute(CHART_CACHE_KEY, compute_chart_data)
    except OperationalError as e:
        logger.warning(f"Chart data query failed: {e}")
        stale, age = last_good(CHART_CACHE_KEY)
        if stale is None:
            raise
        payload = dict(stale)
        payload.update({'warning': DB_TIMEOUT_WARNING, 'cached': True, 'cache_age': round(age, 1)})
        return Response(payload)

    payload = dict(data)
    payload.update({'cached': cached, 'cache_age': round(age, 1)})
    return Response(payload)


@api_view(['GET'])
@permission_classes([IsAdmin])
def bandwidth_usage(request):
    """
    Per-router bandwidth in use by active devices, capped at capacity.
    """
    used = dict(
        active_devices().order_by().values_list('router_id').annotate(total=Sum('bandwidth'))
    )

    routers = []
    for router in Router.objects.filter(is_active=True).order_by('name'):
        usage = min(used.get(router.id) or 0, router.capacity)
        routers.append({
            'id': str(router.id),
            'name': router.name,
            'capacity': router.capacity,
            'used': usage,
            'utilization': round(usage / router.capacity * 100, 1) if router.capacity else 0,
        })

    return Response({
        'routers': routers,
        'total_used': sum(r['used'] for r in routers),
        'total_capacity': sum(r['capacity'] for r in routers),
        'timestamp': timezone.now(),
    })


@api_view(['GET'])
@permission_classes([IsAdmin])
def recent_activity(request):
    """
    Get recent audit log entries.
    """
    queryset = apply_filterset(LogFilter, request, Log.objects.select_related('user'))
    return Response(paginate(request, queryset.order_by('-timestamp'), LogSerializer, 'activities'))
