"""
Core — Exception Handling

Typed domain exceptions raised by the service layer and the DRF
exception handler that turns them into consistent API error envelopes.
Every message is written to be shown to the operator as-is.

@file core/exceptions.py
"""

import logging

from django.core.exceptions import PermissionDenied, ValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('waretrack')


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class BusinessRuleViolation(APIException):
    """Raised when a business rule is violated at the service layer."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Business rule violation.'
    default_code = 'BUSINESS_RULE_VIOLATION'


class InvalidInputError(BusinessRuleViolation):
    """Missing or malformed input: blank adjustment reason, bad report date, unknown direction."""
    default_detail = 'Invalid input.'
    default_code = 'VALIDATION_ERROR'


class InvalidQuantityError(BusinessRuleViolation):
    """Quantity is non-numeric, non-finite, zero or negative."""
    default_detail = 'Quantity must be a positive number.'
    default_code = 'INVALID_QUANTITY'


class InactiveProductError(BusinessRuleViolation):
    default_detail = 'Product is inactive.'
    default_code = 'INACTIVE_PRODUCT'


class InsufficientStockError(APIException):
    """Raised when a dispatch exceeds the available balance."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Insufficient stock for this operation.'
    default_code = 'INSUFFICIENT_STOCK'


class StockInDeficitError(APIException):
    """Raised when dispatching from a product whose balance is already zero or below."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Stock is in deficit. Receive stock before dispatching.'
    default_code = 'STOCK_IN_DEFICIT'


class DuplicateResourceError(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists.'
    default_code = 'DUPLICATE_RESOURCE'


class DuplicateSubmissionError(DuplicateResourceError):
    """Idempotency key already used: the entry was recorded by an earlier submission."""
    default_detail = 'Duplicate submission detected. Entry already recorded.'
    default_code = 'DUPLICATE_SUBMISSION'


class NearDuplicateError(DuplicateResourceError):
    """A similar record exists; the caller may confirm and resubmit to proceed."""
    default_detail = 'A similar record already exists.'
    default_code = 'NEAR_DUPLICATE'


class ResourceNotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'RESOURCE_NOT_FOUND'


class AuthenticationFailedError(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Authentication failed.'
    default_code = 'AUTHENTICATION_FAILED'


# ---------------------------------------------------------------------------
# Standard exception handler
# ---------------------------------------------------------------------------

def standard_exception_handler(exc, context):
    """
    Wraps every error response in the standard envelope:
      { "success": false, "errors": {...}, "code": "ERROR_CODE" }
    """
    if isinstance(exc, Http404):
        exc = ResourceNotFoundError()
    elif isinstance(exc, PermissionDenied):
        exc = APIException(detail='Permission denied.', code='PERMISSION_DENIED')
        exc.status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, ValidationError):
        data = {
            'success': False,
            'errors': exc.message_dict if hasattr(exc, 'message_dict') else {'detail': exc.messages},
            'code': 'VALIDATION_ERROR',
        }
        return Response(data, status=status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)

    if response is None:
        logger.exception('Unhandled exception in view: %s', exc)
        return Response(
            {'success': False, 'errors': {'detail': ['Internal server error.']}, 'code': 'INTERNAL_ERROR'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    code = getattr(exc, 'default_code', 'ERROR')
    if isinstance(response.data, dict):
        errors = response.data
    elif isinstance(response.data, list):
        errors = {'detail': response.data}
    else:
        errors = {'detail': [str(response.data)]}

    response.data = {
        'success': False,
        'errors': errors,
        'code': code,
    }
    return response
