"""
URL configuration for staff endpoints and per-alert actions.
"""
from django.urls import path

from . import staff_views, views

app_name = 'staff'

urlpatterns = [
    path('staff/routers/', staff_views.StaffRouterListView.as_view(), name='routers'),
    path('staff/available-routers/', staff_views.AvailableRouterListView.as_view(), name='available-routers'),
    path('staff/assigned-towns/', staff_views.AssignedTownListView.as_view(), name='assigned-towns'),
    path('staff/alerts/', staff_views.StaffAlertListView.as_view(), name='alerts'),
    path('staff/users/', staff_views.StaffUserListView.as_view(), name='users'),
    path('staff/stats/', staff_views.staff_stats, name='stats'),
    path('staff/routers/<uuid:pk>/assign/',
         staff_views.RouterPlacementView.as_view(operation='assign'), name='router-assign'),
    path('staff/routers/<uuid:pk>/relocate/',
         staff_views.RouterPlacementView.as_view(operation='relocate'), name='router-relocate'),
    path('staff/routers/<uuid:pk>/unassign/',
         staff_views.RouterPlacementView.as_view(operation='unassign'), name='router-unassign'),

    path('alerts/<uuid:pk>/resolve/',
         views.AlertTransitionView.as_view(action='RESOLVE'), name='alert-resolve'),
    path('alerts/<uuid:pk>/dismiss/',
         views.AlertTransitionView.as_view(action='DISMISS'), name='alert-dismiss'),
]
