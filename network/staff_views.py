"""
Staff views.

Every listing here is narrowed to the caller's district or province via
``network.scoping``; ADMIN users pass through unfiltered.
"""
import logging

from django.db.models import Count, Q
from rest_framework import generics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.views import APIView

from core.models import User
from core.permissions import IsStaffMember
from core.serializers import UserSerializer
from . import services
from .filters import RouterFilter, StaffAlertFilter
from .models import Alert, Router, Town
from .scoping import scope_filter, scope_queryset, scope_users
from .serializers import AlertSerializer, RouterSerializer, TownAssignmentSerializer, TownSerializer

logger = logging.getLogger(__name__)


class StaffRouterListView(generics.ListAPIView):
    """Routers inside the caller's area."""

    serializer_class = RouterSerializer
    permission_classes = [IsStaffMember]
    filterset_class = RouterFilter
    envelope = 'routers'
    active_only = False

    def get_queryset(self):
        queryset = scope_queryset(
            Router.objects.select_related('town__district__province', 'created_by'),
            self.request.user, 'router'
        )
        if self.active_only:
            queryset = queryset.filter(is_active=True)
        return queryset.order_by('name')

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.filter_queryset(self.get_queryset()), many=True)
        return Response({self.envelope: serializer.data})


class AvailableRouterListView(StaffRouterListView):
    """Active routers the caller may work with."""

    active_only = True


class AssignedTownListView(generics.ListAPIView):
    """Active towns inside the caller's area, with router counts."""

    serializer_class = TownSerializer
    permission_classes = [IsStaffMember]

    def get_queryset(self):
        queryset = scope_queryset(
            Town.objects.filter(is_active=True).select_related('district__province'),
            self.request.user, 'town'
        )
        return queryset.annotate(router_count=Count('routers', distinct=True)).order_by('name')

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({'towns': serializer.data})


class StaffAlertListView(generics.ListAPIView):
    """
    Alerts on routers inside the caller's area; ACTIVE unless ``status`` says otherwise.
    """

    serializer_class = AlertSerializer
    permission_classes = [IsStaffMember]
    filterset_class = StaffAlertFilter

    def get_queryset(self):
        queryset = scope_queryset(
            Alert.objects.select_related(
                'router__town__district__province', 'resolved_by', 'created_by'
            ),
            self.request.user, 'alert'
        )
        return queryset.order_by('-created_at')

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.filter_queryset(self.get_queryset()), many=True)
        return Response({'alerts': serializer.data})


class StaffUserListView(generics.ListAPIView):
    """Users assigned inside the caller's area."""

    serializer_class = UserSerializer
    permission_classes = [IsStaffMember]

    def get_queryset(self):
        queryset = scope_users(
            User.objects.select_related('assigned_province', 'assigned_district'),
            self.request.user
        )
        return queryset.order_by('name')

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({'users': serializer.data})


@api_view(['GET'])
@permission_classes([IsStaffMember])
def staff_stats(request):
    """Router, alert and town counts for the caller's area."""
    user = request.user
    router_counts = Router.objects.filter(scope_filter(user, 'router')).aggregate(
        total=Count('id'),
        online=Count('id', filter=Q(status=Router.Status.ONLINE)),
        offline=Count('id', filter=Q(status=Router.Status.OFFLINE)),
        maintenance=Count('id', filter=Q(status=Router.Status.MAINTENANCE)),
        error=Count('id', filter=Q(status=Router.Status.ERROR)),
    )
    active_alerts = Alert.objects.filter(
        scope_filter(user, 'alert'), status=Alert.Status.ACTIVE
    ).count()
    total_towns = Town.objects.filter(scope_filter(user, 'town'), is_active=True).count()

    return Response({
        'total_routers': router_counts['total'],
        'online_routers': router_counts['online'],
        'offline_routers': router_counts['offline'],
        'maintenance_routers': router_counts['maintenance'],
        'error_routers': router_counts['error'],
        'active_alerts': active_alerts,
        'total_towns': total_towns,
    })


class RouterPlacementView(APIView):
    """
    Assign, relocate, or unassign a router within the caller's area.
    """
    permission_classes = [IsStaffMember]
    operation = None

    def post(self, request, pk):
        if self.operation == 'unassign':
            router = services.unassign_router(pk, request.user, request)
            message = 'Router unassigned successfully'
        else:
            serializer = TownAssignmentSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            town_id = serializer.validated_data.get('town_id')
            if self.operation == 'assign':
                router = services.assign_router(pk, town_id, request.user, request)
                message = 'Router assigned successfully'
            else:
                router = services.relocate_router(pk, town_id, request.user, request)
                message = 'Router relocated successfully'

        router = Router.objects.select_related('town__district__province', 'created_by').get(pk=router.pk)
        return Response({'message': message, 'router': RouterSerializer(router).data})
