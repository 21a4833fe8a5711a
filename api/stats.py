"""
Dashboard aggregates and their short-lived cache.

Dashboards poll these numbers every few seconds, so each computed payload
is stored in the Django cache for ``STATS_CACHE_TTL`` seconds. Writes do
not invalidate it; the admin refresh endpoint deletes it explicitly. A
copy without expiry is kept as the last good value for serving while the
database is unreachable.
"""
import logging

from django.conf import settings
from django.core.cache import cache
from django.db.models import Avg, Count, Q, Sum
from django.utils import timezone

from core.models import User
from network.models import Alert, District, Province, Router, Town

logger = logging.getLogger(__name__)

STATS_CACHE_KEY = 'dashboard-stats'
CHART_CACHE_KEY = 'chart-data'


def _last_good_key(key):
    return f'{key}:last-good'


def _age(entry):
    return (timezone.now() - entry['stored_at']).total_seconds()


def get_or_compute(key, compute):
    """
    Return ``(value, cached, age_seconds)`` for ``key``.

    On a miss ``compute`` runs and its result is stored under ``key`` with
    the stats TTL and under the last-good key without one.
    """
    entry = cache.get(key)
    if entry is not None:
        logger.debug(f"{key} cache hit")
        return entry['data'], True, _age(entry)

    entry = {'data': compute(), 'stored_at': timezone.now()}
    cache.set(key, entry, settings.DASHBOARD_SETTINGS['STATS_CACHE_TTL'])
    cache.set(_last_good_key(key), entry, None)
    return entry['data'], False, 0.0


def last_good(key):
    """Last computed value for ``key`` regardless of age, as ``(value, age)``."""
    entry = cache.get(_last_good_key(key))
    if entry is None:
        return None, None
    return entry['data'], _age(entry)


def clear_stats():
    """Drop cached stats and chart data, including the last good copies."""
    keys = [STATS_CACHE_KEY, CHART_CACHE_KEY]
    cache.delete_many(keys + [_last_good_key(key) for key in keys])
    logger.info("Dashboard caches cleared")


EMPTY_STATS = {
    'total_routers': 0,
    'online_routers': 0,
    'offline_routers': 0,
    'maintenance_routers': 0,
    'error_routers': 0,
    'total_staff': 0,
    'active_alerts': 0,
    'total_provinces': 0,
    'total_districts': 0,
    'total_towns': 0,
    'average_uptime': 0,
    'total_bandwidth': 0,
}


def compute_dashboard_stats():
    """Aggregate the dashboard counters in a handful of queries."""
    routers = Router.objects.aggregate(
        total=Count('id'),
        online=Count('id', filter=Q(status=Router.Status.ONLINE)),
        offline=Count('id', filter=Q(status=Router.Status.OFFLINE)),
        maintenance=Count('id', filter=Q(status=Router.Status.MAINTENANCE)),
        error=Count('id', filter=Q(status=Router.Status.ERROR)),
        average_uptime=Avg('uptime'),
        total_bandwidth=Sum('bandwidth'),
    )

    return {
        'total_routers': routers['total'],
        'online_routers': routers['online'],
        'offline_routers': routers['offline'],
        'maintenance_routers': routers['maintenance'],
        'error_routers': routers['error'],
        'total_staff': User.objects.filter(role=User.Role.STAFF).count(),
        'active_alerts': Alert.objects.filter(status=Alert.Status.ACTIVE).count(),
        'total_provinces': Province.objects.count(),
        'total_districts': District.objects.count(),
        'total_towns': Town.objects.count(),
        'average_uptime': round(routers['average_uptime'] or 0),
        'total_bandwidth': routers['total_bandwidth'] or 0,
    }


def compute_chart_data():
    """Router status counts per province plus the overall distribution."""
    path = 'districts__towns__routers'
    provinces = Province.objects.annotate(
        total=Count(path, distinct=True),
        online=Count(path, filter=Q(**{f'{path}__status': Router.Status.ONLINE}), distinct=True),
        offline=Count(path, filter=Q(**{f'{path}__status': Router.Status.OFFLINE}), distinct=True),
        maintenance=Count(path, filter=Q(**{f'{path}__status': Router.Status.MAINTENANCE}), distinct=True),
        error=Count(path, filter=Q(**{f'{path}__status': Router.Status.ERROR}), distinct=True),
    ).order_by('name')

    province_stats = [
        {
            'id': str(p.id),
            'name': p.name,
            'total': p.total,
            'online': p.online,
            'offline': p.offline,
            'maintenance': p.maintenance,
            'error': p.error,
        }
        for p in provinces
    ]

    counts = dict(Router.objects.order_by().values_list('status').annotate(count=Count('id')))
    status_distribution = [
        {'status': value, 'label': label, 'count': counts.get(value, 0)}
        for value, label in Router.Status.choices
    ]

    return {
        'province_stats': province_stats,
        'status_distribution': status_distribution,
    }
