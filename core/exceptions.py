"""
JSON error rendering for the REST API.

All errors leave the API as ``{"error": message}``. Validation errors
also carry ``fields`` with the per-field messages, and unexpected
failures add ``details`` only when DEBUG is on.
"""
import logging

from django.conf import settings
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _first_message(detail):
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return 'Invalid request'
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else 'Invalid request'
    return str(detail)


def _field_label(detail):
    if isinstance(detail, dict):
        for key in detail:
            return key
    return None


def api_exception_handler(exc, context):
    """
    DRF exception handler producing ``{'error': ...}`` bodies.
    """
    if isinstance(exc, Http404):
        exc = exceptions.NotFound(str(exc) or 'Not found')
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied(str(exc) or 'Insufficient permissions')
    elif isinstance(exc, DjangoValidationError):
        exc = exceptions.ValidationError(getattr(exc, 'message_dict', None) or exc.messages)

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'API'}: {exc}")
        body = {'error': 'Internal server error'}
        if settings.DEBUG:
            body['details'] = str(exc)
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, exceptions.ValidationError):
        field = _field_label(exc.detail)
        message = _first_message(exc.detail)
        if field and field != 'non_field_errors':
            message = f"{field}: {message}"
        response.data = {'error': message, 'fields': exc.detail}
    else:
        data = response.data
        if isinstance(data, dict) and 'detail' in data:
            message = str(data['detail'])
        else:
            message = _first_message(data)
        response.data = {'error': message}

    if response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
        request = context.get('request')
        logger.info(f"Access refused ({response.status_code}) for {request.path if request else '?'}")

    return response
