"""
URL configuration for NetAdmin.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.1/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Admin interface
    path('admin/', admin.site.urls),

    # Authentication and own account
    path('api/auth/', include('core.urls')),

    # Admin console
    path('api/admin/', include('core.urls_admin')),
    path('api/admin/', include('network.urls')),

    # Staff endpoints and per-alert actions
    path('api/', include('network.urls_staff')),

    # Dashboard stats and activity
    path('api/', include('api.urls')),

    # Prometheus metrics
    path('metrics/', include('django_prometheus.urls')),
]

admin.site.site_header = "NetAdmin"
admin.site.site_title = "NetAdmin"
admin.site.index_title = "Network operations administration"
