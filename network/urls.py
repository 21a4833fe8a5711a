"""
URL configuration for admin network management.
"""
from django.urls import path

from . import views

app_name = 'network'

urlpatterns = [
    # Location hierarchy
    path('provinces/', views.ProvinceListCreateView.as_view(), name='province-list'),
    path('provinces/<uuid:pk>/', views.ProvinceDetailView.as_view(), name='province-detail'),
    path('districts/', views.DistrictListCreateView.as_view(), name='district-list'),
    path('districts/<uuid:pk>/', views.DistrictDetailView.as_view(), name='district-detail'),
    path('towns/', views.TownListCreateView.as_view(), name='town-list'),
    path('towns/<uuid:pk>/', views.TownDetailView.as_view(), name='town-detail'),

    # Routers
    path('routers/', views.RouterListCreateView.as_view(), name='router-list'),
    path('routers/<uuid:pk>/', views.RouterDetailView.as_view(), name='router-detail'),

    # Connected devices
    path('connected-users/', views.ConnectedUserListView.as_view(), name='connected-user-list'),
    path('connected-users/count-by-router/', views.connected_user_counts, name='connected-user-counts'),
    path('connected-users/<uuid:pk>/block/', views.BlockConnectedUserView.as_view(), name='connected-user-block'),
    path('connected-users/<uuid:pk>/unblock/', views.UnblockConnectedUserView.as_view(), name='connected-user-unblock'),

    # Alerts
    path('alerts/', views.AdminAlertView.as_view(), name='alert-list'),
    path('alerts/new/', views.AlertCreateView.as_view(), name='alert-create'),
]
