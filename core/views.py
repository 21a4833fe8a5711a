"""
Views for authentication, profile management, staff accounts and settings.
"""
import logging

from django.contrib.auth import authenticate
from django.db import OperationalError, transaction
from django.utils import timezone
from rest_framework import generics, status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .audit import log_activity
from .filters import StaffFilter
from .authentication import clear_auth_cookie, issue_token, set_auth_cookie
from .mixins import AuditedCRUDMixin, DB_TIMEOUT_WARNING
from .models import Setting, User
from .permissions import IsAdmin, IsAuthenticatedUser
from .serializers import (
    ChangePasswordSerializer,
    LoginSerializer,
    ProfileSerializer,
    SettingSerializer,
    SettingsUpdateSerializer,
    StaffSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


def _with_assignment(user):
    return User.objects.select_related('assigned_province', 'assigned_district').get(pk=user.pk)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def login(request):
    """
    Exchange email and password for a session cookie.
    """
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = authenticate(
        request=request,
        email=serializer.validated_data['email'].lower(),
        password=serializer.validated_data['password'],
    )
    if user is None:
        logger.warning(f"Failed login for {serializer.validated_data['email']}")
        return Response({'error': 'Invalid credentials'}, status=status.HTTP_401_UNAUTHORIZED)

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])
    log_activity(user, 'LOGIN', f'User {user.email} logged in', request)

    response = Response({'user': UserSerializer(_with_assignment(user)).data})
    return set_auth_cookie(response, issue_token(user))


class LogoutView(APIView):
    """
    Clear the session cookie and record the logout.
    """
    permission_classes = [IsAuthenticatedUser]

    def post(self, request):
        log_activity(request.user, 'LOGOUT', f'User {request.user.email} logged out', request)
        response = Response({'message': 'Successfully logged out'})
        return clear_auth_cookie(response)


@api_view(['GET'])
@permission_classes([IsAuthenticatedUser])
def me(request):
    """Current user with province and district."""
    return Response({'user': UserSerializer(request.user).data})


@api_view(['POST'])
@permission_classes([IsAuthenticatedUser])
def refresh_session(request):
    """
    Re-issue the session token so it reflects the latest profile.
    """
    user = _with_assignment(request.user)
    response = Response({'user': UserSerializer(user).data})
    return set_auth_cookie(response, issue_token(user))


class ProfileView(APIView):
    """
    Update the caller's own name and email.
    """
    permission_classes = [IsAuthenticatedUser]

    def get(self, request):
        return Response({'user': UserSerializer(request.user).data})

    def put(self, request):
        serializer = ProfileSerializer(request.user, data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        log_activity(user, 'UPDATE_PROFILE', 'Updated profile information', request)
        return Response({
            'message': 'Profile updated successfully',
            'user': UserSerializer(_with_assignment(user)).data,
        })


class ChangePasswordView(APIView):
    """
    Change the caller's password after verifying the current one.
    """
    permission_classes = [IsAuthenticatedUser]

    def put(self, request):
        serializer = ChangePasswordSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)

        user = request.user
        user.set_password(serializer.validated_data['new_password'])
        user.save(update_fields=['password', 'updated_at'])
        log_activity(user, 'CHANGE_PASSWORD', 'Changed password', request)

        return Response({'message': 'Password changed successfully'})

    post = put


class StaffListCreateView(AuditedCRUDMixin, generics.ListCreateAPIView):
    """List and create staff accounts."""

    serializer_class = StaffSerializer
    permission_classes = [IsAdmin]
    filterset_class = StaffFilter
    audit_entity = 'STAFF'
    envelope = 'staff'
    envelope_plural = 'staff'

    def get_queryset(self):
        return User.objects.filter(role=User.Role.STAFF).select_related(
            'assigned_province', 'assigned_district'
        ).order_by('-created_at')

    def describe(self, instance):
        return f"staff member {instance.name} ({instance.email})"


class StaffDetailView(AuditedCRUDMixin, generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update, or delete a staff account."""

    queryset = User.objects.filter(role=User.Role.STAFF).select_related(
        'assigned_province', 'assigned_district'
    )
    serializer_class = StaffSerializer
    permission_classes = [IsAdmin]
    audit_entity = 'STAFF'
    envelope = 'staff'
    envelope_plural = 'staff'

    def describe(self, instance):
        return f"staff member {instance.name} ({instance.email})"


class SettingsView(APIView):
    """
    Read all settings grouped by category, or upsert a batch of them.
    """
    permission_classes = [IsAdmin]

    def get(self, request):
        try:
            settings_qs = Setting.objects.order_by('category', 'key')
            data = SettingSerializer(settings_qs, many=True).data
        except OperationalError as e:
            logger.warning(f"Settings lookup failed, serving fallback: {e}")
            return Response({'settings': [], 'warning': DB_TIMEOUT_WARNING, 'cached': True})

        grouped = {}
        for entry in data:
            grouped.setdefault(entry['category'], []).append(entry)
        return Response({'settings': data, 'categories': grouped})

    def put(self, request):
        serializer = SettingsUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            saved = []
            for entry in serializer.validated_data['settings']:
                defaults = {'value': entry['value'], 'updated_by': request.user}
                if 'description' in entry:
                    defaults['description'] = entry['description']
                if 'category' in entry:
                    defaults['category'] = entry['category']
                setting, _ = Setting.objects.update_or_create(key=entry['key'], defaults=defaults)
                saved.append(setting)

            keys = ', '.join(s.key for s in saved)
            log_activity(request.user, 'UPDATE_SETTINGS', f'Updated settings: {keys}', request)

        return Response({
            'message': 'Settings updated successfully',
            'settings': SettingSerializer(saved, many=True).data,
        }, status=status.HTTP_200_OK)
