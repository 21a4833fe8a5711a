"""
URL configuration for dashboard endpoints.
"""
from django.urls import path

from . import dashboard_views

app_name = 'api'

urlpatterns = [
    path('stats/', dashboard_views.dashboard_stats, name='stats'),
    path('admin/stats/', dashboard_views.admin_stats, name='admin-stats'),
    path('admin/stats/refresh/', dashboard_views.refresh_stats, name='stats-refresh'),
    path('admin/chart-data/', dashboard_views.chart_data, name='chart-data'),
    path('admin/bandwidth-usage/', dashboard_views.bandwidth_usage, name='bandwidth-usage'),
    path('admin/activity/', dashboard_views.recent_activity, name='activity'),
]
