"""
URL configuration for authentication and the caller's own account.
"""
from django.urls import path

from . import views

app_name = 'core'

urlpatterns = [
    # Session
    path('login/', views.login, name='login'),
    path('logout/', views.LogoutView.as_view(), name='logout'),
    path('me/', views.me, name='me'),
    path('session/', views.refresh_session, name='session'),

    # Account management
    path('profile/', views.ProfileView.as_view(), name='profile'),
    path('change-password/', views.ChangePasswordView.as_view(), name='change_password'),
]
