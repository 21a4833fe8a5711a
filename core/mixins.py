"""
View mixins shared by the admin CRUD endpoints.
"""
import logging

from django.db import OperationalError
from rest_framework import status
from rest_framework.response import Response

from .audit import log_activity

logger = logging.getLogger(__name__)

DB_TIMEOUT_WARNING = 'Database connection timeout'


class AuditedCRUDMixin:
    """
    Wrap generic view responses in named envelopes and audit every write.

    Subclasses set ``audit_entity`` (``ROUTER`` gives ``CREATE_ROUTER`` and
    so on), ``envelope`` and ``envelope_plural``. With ``timeout_fallback``
    a database outage while listing returns an empty, flagged payload
    instead of an error.
    """
    audit_entity = None
    envelope = None
    envelope_plural = None
    timeout_fallback = False

    def describe(self, instance):
        return f"{self.audit_entity.lower()} {getattr(instance, 'name', instance)}"

    def audit(self, verb, instance):
        log_activity(
            self.request.user,
            f'{verb}_{self.audit_entity}',
            f'{verb.capitalize()}d {self.describe(instance)}',
            self.request,
        )

    def get_save_kwargs(self):
        return {}

    def perform_create(self, serializer):
        instance = serializer.save(**self.get_save_kwargs())
        self.audit('CREATE', instance)

    def perform_update(self, serializer):
        instance = serializer.save()
        self.audit('UPDATE', instance)

    def perform_destroy(self, instance):
        description = self.describe(instance)
        instance.delete()
        log_activity(
            self.request.user,
            f'DELETE_{self.audit_entity}',
            f'Deleted {description}',
            self.request,
        )

    def list(self, request, *args, **kwargs):
        try:
            queryset = self.filter_queryset(self.get_queryset())
            serializer = self.get_serializer(queryset, many=True)
            return Response({self.envelope_plural: serializer.data})
        except OperationalError as e:
            if not self.timeout_fallback:
                raise
            logger.warning(f"Listing {self.envelope_plural} failed, serving fallback: {e}")
            return Response({
                self.envelope_plural: [],
                'warning': DB_TIMEOUT_WARNING,
                'cached': True,
            })

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return Response({self.envelope: serializer.data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        return Response({self.envelope: serializer.data}, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        return Response({self.envelope: serializer.data})

    def destroy(self, request, *args, **kwargs):
        self.perform_destroy(self.get_object())
        return Response({'message': f'{self.audit_entity.capitalize()} deleted successfully'})
