"""
Admin views for locations, routers, connected devices and alerts.
"""
import logging

from django.db.models import Count
from django.utils import timezone
from rest_framework import generics, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.views import APIView

from core.audit import log_activity
from core.filters import apply_filterset
from core.mixins import AuditedCRUDMixin
from core.pagination import paginate
from core.permissions import IsAdmin, IsStaffMember
from . import services
from .filters import AlertFilter, ConnectedUserFilter, DistrictFilter, RouterFilter, TownFilter
from .models import Alert, ConnectedUser, District, Province, Router, Town
from .serializers import (
    AlertActionSerializer,
    AlertCreateSerializer,
    AlertSerializer,
    ConnectedUserSerializer,
    DistrictSerializer,
    ProvinceSerializer,
    RouterSerializer,
    TownSerializer,
)

logger = logging.getLogger(__name__)


# Location hierarchy

class ProvinceListCreateView(AuditedCRUDMixin, generics.ListCreateAPIView):
    """List and create provinces."""

    serializer_class = ProvinceSerializer
    permission_classes = [IsAdmin]
    audit_entity = 'PROVINCE'
    envelope = 'province'
    envelope_plural = 'provinces'

    def get_queryset(self):
        return Province.objects.annotate(
            district_count=Count('districts', distinct=True),
            user_count=Count('assigned_users', distinct=True),
        ).order_by('name')


class ProvinceDetailView(AuditedCRUDMixin, generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update, or delete a province."""

    queryset = Province.objects.all()
    serializer_class = ProvinceSerializer
    permission_classes = [IsAdmin]
    audit_entity = 'PROVINCE'
    envelope = 'province'
    envelope_plural = 'provinces'


class DistrictListCreateView(AuditedCRUDMixin, generics.ListCreateAPIView):
    """List and create districts."""

    serializer_class = DistrictSerializer
    permission_classes = [IsAdmin]
    filterset_class = DistrictFilter
    audit_entity = 'DISTRICT'
    envelope = 'district'
    envelope_plural = 'districts'

    def get_queryset(self):
        return District.objects.select_related('province').annotate(
            town_count=Count('towns', distinct=True)
        ).order_by('name')


class DistrictDetailView(AuditedCRUDMixin, generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update, or delete a district."""

    queryset = District.objects.select_related('province')
    serializer_class = DistrictSerializer
    permission_classes = [IsAdmin]
    audit_entity = 'DISTRICT'
    envelope = 'district'
    envelope_plural = 'districts'


class TownListCreateView(AuditedCRUDMixin, generics.ListCreateAPIView):
    """List and create towns."""

    serializer_class = TownSerializer
    permission_classes = [IsAdmin]
    filterset_class = TownFilter
    audit_entity = 'TOWN'
    envelope = 'town'
    envelope_plural = 'towns'

    def get_queryset(self):
        return Town.objects.select_related('district__province').annotate(
            router_count=Count('routers', distinct=True)
        ).order_by('name')


class TownDetailView(AuditedCRUDMixin, generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update, or delete a town."""

    queryset = Town.objects.select_related('district__province')
    serializer_class = TownSerializer
    permission_classes = [IsAdmin]
    audit_entity = 'TOWN'
    envelope = 'town'
    envelope_plural = 'towns'


# Routers

class RouterListCreateView(AuditedCRUDMixin, generics.ListCreateAPIView):
    """List and create routers."""

    serializer_class = RouterSerializer
    permission_classes = [IsAdmin]
    filterset_class = RouterFilter
    audit_entity = 'ROUTER'
    envelope = 'router'
    envelope_plural = 'routers'
    timeout_fallback = True

    def get_queryset(self):
        return Router.objects.select_related('town__district__province', 'created_by').order_by('-created_at')

    def get_save_kwargs(self):
        return {'created_by': self.request.user}

    def describe(self, instance):
        return f"router {instance.name} ({instance.ip_address})"


class RouterDetailView(AuditedCRUDMixin, generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update, or delete a router."""

    queryset = Router.objects.select_related('town__district__province', 'created_by')
    serializer_class = RouterSerializer
    permission_classes = [IsAdmin]
    audit_entity = 'ROUTER'
    envelope = 'router'
    envelope_plural = 'routers'

    def describe(self, instance):
        return f"router {instance.name} ({instance.ip_address})"


# Connected devices

class ConnectedUserListView(generics.ListAPIView):
    """List devices seen on routers."""

    serializer_class = ConnectedUserSerializer
    permission_classes = [IsAdmin]
    filterset_class = ConnectedUserFilter

    def get_queryset(self):
        return ConnectedUser.objects.select_related('router', 'blocked_by').order_by('-last_seen')

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.filter_queryset(self.get_queryset()), many=True)
        return Response({'users': serializer.data})


def _firewall_payload(device, result, verb):
    return {
        'success': True,
        'message': f"Successfully {verb} user {device.device_name or device.mac_address}",
        'firewall': {'message': result.message, 'skipped': result.skipped},
        'user': ConnectedUserSerializer(device).data,
    }


class BlockConnectedUserView(APIView):
    """
    Block a device on the firewall and mark it blocked.
    """
    permission_classes = [IsAdmin]

    def post(self, request, pk):
        device, result = services.block_device(pk, request.user, request)
        return Response(_firewall_payload(device, result, 'blocked'))


class UnblockConnectedUserView(APIView):
    """
    Lift a firewall block and mark the device active again.
    """
    permission_classes = [IsAdmin]

    def post(self, request, pk):
        device, result = services.unblock_device(pk, request.user, request)
        return Response(_firewall_payload(device, result, 'unblocked'))


@api_view(['GET'])
@permission_classes([IsAdmin])
def connected_user_counts(request):
    """Active device counts per router."""
    rows = services.active_devices().order_by().values('router_id').annotate(count=Count('id'))
    counts = {str(row['router_id']): row['count'] for row in rows}
    return Response({
        'counts': counts,
        'total': sum(counts.values()),
        'timestamp': timezone.now(),
    })


# Alerts

class AdminAlertView(APIView):
    """
    Page through alerts, or resolve/dismiss one by id.
    """
    permission_classes = [IsAdmin]

    def get(self, request):
        queryset = Alert.objects.select_related(
            'router__town__district__province', 'resolved_by', 'created_by'
        )
        queryset = apply_filterset(AlertFilter, request, queryset)
        return Response(paginate(request, queryset.order_by('-created_at'), AlertSerializer, 'alerts'))

    def post(self, request):
        serializer = AlertActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        alert = services.transition_alert(
            serializer.validated_data['alert_id'],
            serializer.validated_data['action'],
            request.user,
            request,
        )
        return Response({
            'success': True,
            'message': f'Alert {alert.status.lower()} successfully',
            'alert': AlertSerializer(alert).data,
        })


class AlertCreateView(generics.CreateAPIView):
    """Raise a new alert against a router."""

    serializer_class = AlertCreateSerializer
    permission_classes = [IsAdmin]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        alert = serializer.save(created_by=request.user)
        log_activity(
            request.user, 'CREATE_ALERT',
            f'Created {alert.severity} alert for router {alert.router.name}: {alert.message}',
            request,
        )
        return Response({'alert': AlertSerializer(alert).data}, status=status.HTTP_201_CREATED)


class AlertTransitionView(APIView):
    """
    Resolve or dismiss a single alert; staff are limited to their area.
    """
    permission_classes = [IsStaffMember]
    action = None

    def post(self, request, pk):
        alert = services.transition_alert(pk, self.action, request.user, request)
        return Response({
            'success': True,
            'message': f'Alert {alert.status.lower()} successfully',
            'alert': AlertSerializer(alert).data,
        })
