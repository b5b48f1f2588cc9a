import logging

from django.db import IntegrityError
from django.db.models.deletion import ProtectedError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from domain.shared.exceptions import (
    BOMValidationException,
    DomainException,
    EntityNotFoundException,
    SequenceAllocationException,
)

logger = logging.getLogger(__name__)


def domain_exception_status(exc):
    if isinstance(exc, EntityNotFoundException):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, SequenceAllocationException):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_400_BAD_REQUEST


def custom_exception_handler(exc, context):
    """
    Map domain and database errors to API responses, then fall back to DRF.
    """
    if isinstance(exc, DomainException):
        code = domain_exception_status(exc)
        body = {
            'detail': exc.message,
            'error': exc.code.lower(),
        }
        if isinstance(exc, BOMValidationException):
            body['problems'] = exc.details.get('problems', [])
        elif exc.details:
            body['details'] = exc.details

        if code >= 500:
            logger.error("%s: %s", exc.code, exc.message)
        return Response(body, status=code)

    if isinstance(exc, ProtectedError):
        protected = [str(o) for o in list(exc.protected_objects)[:5]]
        return Response(
            {
                'detail': 'Cannot delete the object: other records refer to it.',
                'error': 'protected_error',
                'protected_objects_sample': protected,
            },
            status=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, IntegrityError):
        logger.warning("Integrity error: %s", exc)
        return Response(
            {
                'detail': 'Data integrity violation.',
                'error': 'integrity_error',
            },
            status=status.HTTP_409_CONFLICT,
        )

    return exception_handler(exc, context)
