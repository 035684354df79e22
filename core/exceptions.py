# core/exceptions.py
import logging

from django.db import DatabaseError, InterfaceError, OperationalError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class InsufficientFunds(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Insufficient balance for this operation.'
    default_code = 'insufficient_funds'


class ConflictError(APIException):
    """Raised when a state machine transition is not allowed"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The resource is not in a state that allows this action.'
    default_code = 'conflict'


class LockPeriodActive(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Withdrawal lock period has not ended.'
    default_code = 'lock_period_active'

    def __init__(self, remaining_days, lock_end_date, detail=None):
        super().__init__(detail=detail)
        self.remaining_days = remaining_days
        self.lock_end_date = lock_end_date


class DatabaseUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = (
        'Database service is temporarily unavailable. Please try again later '
        'or contact support if the issue persists.'
    )
    default_code = 'database_unavailable'


def api_exception_handler(exc, context):
    """
    Render every API error as {"error", "code", "details"?}.

    Storage failures are classified (connection vs. generic) and replaced with
    a safe message; the driver error is only logged.
    """
    view = context.get('view')
    view_name = view.__class__.__name__ if view else 'unknown'

    if isinstance(exc, (OperationalError, InterfaceError)):
        logger.error(f"Database connection error in {view_name}: {exc}", exc_info=True)
        exc = DatabaseUnavailable()
    elif isinstance(exc, DatabaseError):
        logger.error(f"Database error in {view_name}: {exc}", exc_info=True)
        return Response({
            'error': 'An unexpected error occurred. Please try again later.',
            'code': 'database_error',
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.data = {
            'error': 'Validation failed',
            'code': 'invalid',
            'details': response.data,
        }
        return response

    detail = response.data.get('detail') if isinstance(response.data, dict) else response.data
    codes = exc.get_codes() if isinstance(exc, APIException) else None
    body = {
        'error': str(detail),
        'code': codes if isinstance(codes, str) else 'error',
    }

    if isinstance(exc, LockPeriodActive):
        body['remainingDays'] = exc.remaining_days
        body['lockEndDate'] = exc.lock_end_date.isoformat()

    response.data = body
    return response
