"""
FilterSets for the location, router, device and alert listings.
"""
from django.db.models import Q
from django_filters import rest_framework as filters

from core.filters import UpperChoiceFilter
from .models import Alert, ConnectedUser, District, Router, Town

ALL = 'ALL'


class DistrictFilter(filters.FilterSet):
    province_id = filters.UUIDFilter(field_name='province')

    class Meta:
        model = District
        fields = []


class TownFilter(filters.FilterSet):
    district_id = filters.UUIDFilter(field_name='district')
    province_id = filters.UUIDFilter(field_name='district__province')

    class Meta:
        model = Town
        fields = []


class RouterFilter(filters.FilterSet):
    town_id = filters.UUIDFilter(field_name='town')
    status = UpperChoiceFilter(choices=Router.Status.choices)
    search = filters.CharFilter(method='filter_search')

    class Meta:
        model = Router
        fields = []

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(name__icontains=value) |
            Q(ip_address__icontains=value) |
            Q(model__icontains=value) |
            Q(location__icontains=value)
        )


class ConnectedUserFilter(filters.FilterSet):
    router = filters.UUIDFilter(field_name='router')
    blocked = filters.BooleanFilter(field_name='is_blocked')
    status = UpperChoiceFilter(choices=ConnectedUser.Status.choices)
    search = filters.CharFilter(method='filter_search')

    class Meta:
        model = ConnectedUser
        fields = []

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(device_name__icontains=value) |
            Q(ip_address__icontains=value) |
            Q(mac_address__icontains=value)
        )


class AlertFilter(filters.FilterSet):
    """
    ``status=ALL`` lists every alert; no ``status`` means the same.
    """
    status = UpperChoiceFilter(choices=Alert.Status.choices + [(ALL, 'All')], method='filter_status')
    severity = UpperChoiceFilter(choices=Alert.Severity.choices)
    router = filters.UUIDFilter(field_name='router')

    class Meta:
        model = Alert
        fields = []

    def filter_status(self, queryset, name, value):
        if value == ALL:
            return queryset
        return queryset.filter(status=value)


class StaffAlertFilter(AlertFilter):
    """Staff listings default to ACTIVE alerts."""

    def __init__(self, data=None, *args, **kwargs):
        if data is not None:
            data = data.copy()
            data.setdefault('status', Alert.Status.ACTIVE)
        super().__init__(data, *args, **kwargs)
