"""
Query-string filters shared by the API views.

Filters are declared with django-filter so malformed values (a non-UUID
id, an unknown status) are rejected with 400 instead of reaching the ORM.
"""
from django_filters import fields, rest_framework as filters
from django_filters.utils import translate_validation

from .models import Log, User


class UpperChoiceField(fields.ChoiceField):
    """Choice field that accepts values in any case."""

    def to_python(self, value):
        return super().to_python(value).upper()


class UpperChoiceFilter(filters.ChoiceFilter):
    field_class = UpperChoiceField


def apply_filterset(filterset_class, request, queryset):
    """
    Filter ``queryset`` outside a generic view.

    Raises a DRF ``ValidationError`` when the query string does not validate,
    as ``DjangoFilterBackend`` does.
    """
    filterset = filterset_class(request.query_params, queryset=queryset, request=request)
    if not filterset.is_valid():
        raise translate_validation(filterset.errors)
    return filterset.qs


class StaffFilter(filters.FilterSet):
    province_id = filters.UUIDFilter(field_name='assigned_province')
    district_id = filters.UUIDFilter(field_name='assigned_district')

    class Meta:
        model = User
        fields = []


class LogFilter(filters.FilterSet):
    action = filters.CharFilter(method='filter_action')
    user_id = filters.UUIDFilter(field_name='user')

    class Meta:
        model = Log
        fields = []

    def filter_action(self, queryset, name, value):
        return queryset.filter(action=value.upper())
