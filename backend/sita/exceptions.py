"""API error types and the project-wide DRF exception handler.

Services raise:
- django ``ValidationError`` for bad input (400)
- ``rest_framework.exceptions.NotFound`` for missing records (404)
- ``rest_framework.exceptions.PermissionDenied`` for ownership mismatches (403)
- ``Conflict`` for duplicates, in-use records and exhausted score budgets (409)

The handler below turns all of them into one JSON shape:
``{"status_code": ..., "detail": "...", "path": "...", "errors": {...}}``.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The request conflicts with existing data.'
    default_code = 'conflict'


class ConversionFailed(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'Failed to convert document to PDF.'
    default_code = 'conversion_failed'


def _django_validation_detail(exc: DjangoValidationError):
    if hasattr(exc, 'error_dict'):
        return exc.message_dict
    return exc.messages


def _first_message(data) -> str:
    if isinstance(data, dict):
        if 'detail' in data:
            return str(data['detail'])
        for value in data.values():
            return _first_message(value)
        return ''
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else ''
    return str(data)


def custom_exception_handler(exc, context):
    if isinstance(exc, DjangoValidationError):
        exc = DRFValidationError(detail=_django_validation_detail(exc))

    response = exception_handler(exc, context)

    request = context.get('request') if context else None
    path = getattr(request, 'path', '')

    if response is None:
        logger.error('Unhandled API error path=%s error=%s', path, exc, exc_info=exc)
        return None

    data = response.data
    body = {
        'status_code': response.status_code,
        'detail': _first_message(data),
        'path': path,
    }
    if isinstance(data, dict) and set(data) - {'detail'}:
        body['errors'] = data
    elif isinstance(data, list) and len(data) > 1:
        body['errors'] = data

    if response.status_code >= 500:
        logger.error('API error path=%s status=%s detail=%s', path, response.status_code, body['detail'])

    response.data = body
    return response
