# core/exceptions.py
"""
Project-wide DRF exception handler.

Every failure leaves the API as ``{"error": "<message>"}`` with the HTTP
status carrying the kind (401/403/404/400/500). Serializer field errors are
also attached under ``detail`` so the dashboard can highlight fields.
"""
import logging

from django.http import Http404
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('django')


def _first_message(detail):
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return "Invalid input"
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else "Invalid input"
    return str(detail)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, ValidationError):
            response.data = {
                'error': _first_message(exc.detail),
                'detail': exc.detail,
            }
        elif isinstance(exc, Http404):
            response.data = {'error': str(exc) or 'Not found'}
        elif isinstance(exc, DjangoPermissionDenied):
            response.data = {'error': str(exc) or 'Forbidden'}
        else:
            response.data = {'error': _first_message(getattr(exc, 'detail', str(exc)))}
        return response

    # Anything DRF does not know about is an internal error
    view = context.get('view')
    logger.error(
        f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {str(exc)}",
        exc_info=exc,
    )
    return Response(
        {'error': str(exc) or 'Server error'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
