"""
Serializers for the location hierarchy, routers, devices and alerts.
"""
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from .models import Alert, ConnectedUser, District, Province, Router, Town


class ProvinceRefSerializer(serializers.ModelSerializer):

    class Meta:
        model = Province
        fields = ['id', 'name', 'code']


class DistrictRefSerializer(serializers.ModelSerializer):
    province = ProvinceRefSerializer(read_only=True)

    class Meta:
        model = District
        fields = ['id', 'name', 'code', 'province']


class TownRefSerializer(serializers.ModelSerializer):
    district = DistrictRefSerializer(read_only=True)

    class Meta:
        model = Town
        fields = ['id', 'name', 'code', 'district']


class ProvinceSerializer(serializers.ModelSerializer):
    """Province with district and assigned-user counts."""

    district_count = serializers.SerializerMethodField()
    user_count = serializers.SerializerMethodField()

    class Meta:
        model = Province
        fields = [
            'id', 'name', 'code', 'is_active', 'district_count', 'user_count',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {
            'name': {'validators': [UniqueValidator(Province.objects.all(), message='Province name already exists')]},
            'code': {'validators': [UniqueValidator(Province.objects.all(), message='Province code already exists')]},
        }

    def get_district_count(self, obj):
        count = getattr(obj, 'district_count', None)
        return count if count is not None else obj.districts.count()

    def get_user_count(self, obj):
        count = getattr(obj, 'user_count', None)
        return count if count is not None else obj.assigned_users.count()


class DistrictSerializer(serializers.ModelSerializer):
    """District with its province."""

    province_id = serializers.PrimaryKeyRelatedField(source='province', queryset=Province.objects.all())
    province = ProvinceRefSerializer(read_only=True)
    town_count = serializers.SerializerMethodField()

    class Meta:
        model = District
        fields = [
            'id', 'name', 'code', 'is_active', 'province_id', 'province',
            'town_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_town_count(self, obj):
        count = getattr(obj, 'town_count', None)
        return count if count is not None else obj.towns.count()


class TownSerializer(serializers.ModelSerializer):
    """Town with district and province."""

    district_id = serializers.PrimaryKeyRelatedField(
        source='district', queryset=District.objects.select_related('province')
    )
    district = DistrictRefSerializer(read_only=True)
    router_count = serializers.SerializerMethodField()

    class Meta:
        model = Town
        fields = [
            'id', 'name', 'code', 'is_active', 'district_id', 'district',
            'router_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_router_count(self, obj):
        count = getattr(obj, 'router_count', None)
        return count if count is not None else obj.routers.count()


class RouterSerializer(serializers.ModelSerializer):
    """Router with its full location chain and creator."""

    town_id = serializers.PrimaryKeyRelatedField(
        source='town', queryset=Town.objects.select_related('district__province')
    )
    town = TownRefSerializer(read_only=True)
    created_by = serializers.SerializerMethodField()

    class Meta:
        model = Router
        fields = [
            'id', 'name', 'model', 'ip_address', 'mac_address', 'status',
            'uptime', 'bandwidth', 'capacity', 'location', 'is_active',
            'town_id', 'town', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_by', 'created_at', 'updated_at']
        extra_kwargs = {
            'ip_address': {'validators': [UniqueValidator(Router.objects.all(), message='IP address already exists')]},
            'capacity': {'min_value': 0},
            'uptime': {'min_value': 0, 'max_value': 100},
            'bandwidth': {'min_value': 0},
        }

    def get_created_by(self, obj):
        if obj.created_by_id is None:
            return None
        return {'id': str(obj.created_by_id), 'name': obj.created_by.name, 'email': obj.created_by.email}


class ConnectedUserSerializer(serializers.ModelSerializer):
    """End-user device with a short router reference."""

    router = serializers.SerializerMethodField()
    blocked_by = serializers.SerializerMethodField()

    class Meta:
        model = ConnectedUser
        fields = [
            'id', 'ip_address', 'mac_address', 'device_name', 'status', 'bandwidth',
            'is_blocked', 'blocked_at', 'blocked_by', 'last_seen', 'connected_at', 'router'
        ]
        read_only_fields = fields

    def get_router(self, obj):
        return {'id': str(obj.router_id), 'name': obj.router.name, 'ip_address': obj.router.ip_address}

    def get_blocked_by(self, obj):
        if obj.blocked_by_id is None:
            return None
        return {'id': str(obj.blocked_by_id), 'name': obj.blocked_by.name}


class AlertSerializer(serializers.ModelSerializer):
    """Alert with router, location and the users who raised or closed it."""

    router = serializers.SerializerMethodField()
    resolved_by = serializers.SerializerMethodField()
    created_by = serializers.SerializerMethodField()

    class Meta:
        model = Alert
        fields = [
            'id', 'message', 'severity', 'status', 'router',
            'resolved_at', 'resolved_by', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_router(self, obj):
        router = obj.router
        return {
            'id': str(router.id),
            'name': router.name,
            'ip_address': router.ip_address,
            'status': router.status,
            'town': TownRefSerializer(router.town).data if router.town_id else None,
        }

    def _user_ref(self, user_id, user):
        if user_id is None:
            return None
        return {'id': str(user_id), 'name': user.name, 'email': user.email}

    def get_resolved_by(self, obj):
        return self._user_ref(obj.resolved_by_id, obj.resolved_by)

    def get_created_by(self, obj):
        return self._user_ref(obj.created_by_id, obj.created_by)


class AlertCreateSerializer(serializers.ModelSerializer):
    router_id = serializers.PrimaryKeyRelatedField(source='router', queryset=Router.objects.all())

    class Meta:
        model = Alert
        fields = ['id', 'router_id', 'message', 'severity']
        read_only_fields = ['id']


class AlertActionSerializer(serializers.Serializer):
    alert_id = serializers.CharField()
    action = serializers.CharField()


class TownAssignmentSerializer(serializers.Serializer):
    town_id = serializers.CharField(required=False, allow_blank=True)
