"""
URL configuration for admin-only staff and settings management.
"""
from django.urls import path

from . import views

app_name = 'core_admin'

urlpatterns = [
    path('staff/', views.StaffListCreateView.as_view(), name='staff-list'),
    path('staff/<uuid:pk>/', views.StaffDetailView.as_view(), name='staff-detail'),
    path('settings/', views.SettingsView.as_view(), name='settings'),
]
