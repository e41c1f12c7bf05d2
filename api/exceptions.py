"""
REST exception handler.

Domain exceptions raised by the services become ``{"error", "code"}``
responses; everything DRF already knows about keeps its status but is
reshaped into the same envelope.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import (
    BaseApplicationException,
    NotFoundError,
    PermissionDeniedError,
    RoomStatusUnavailableError,
)

logger = logging.getLogger(__name__)


def _status_for(exc, view):
    if isinstance(exc, PermissionDeniedError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, NotFoundError):
        # Some actions treat an unknown referenced id as a bad request body
        action = getattr(view, 'action', None)
        if action and action in getattr(view, 'bad_request_on_not_found', ()):
            return status.HTTP_400_BAD_REQUEST
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, RoomStatusUnavailableError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_400_BAD_REQUEST


def domain_exception_handler(exc, context):
    view = context.get('view')

    if isinstance(exc, BaseApplicationException):
        code = _status_for(exc, view)
        if code >= 500:
            logger.error(f"{exc.code}: {exc.message}")
        payload = {'error': exc.message, 'code': exc.code}
        if exc.details:
            payload['details'] = exc.details
        return Response(payload, status=code)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, DRFValidationError):
        response.data = {
            'error': 'Invalid request data',
            'code': 'VALIDATION_ERROR',
            'details': response.data,
        }
    elif isinstance(response.data, dict) and 'detail' in response.data:
        detail = response.data['detail']
        response.data = {
            'error': str(detail),
            'code': str(getattr(detail, 'code', 'error')).upper(),
        }
    return response
