"""
Domain errors raised by the service layer.

Routers translate them into HTTP responses with ``http_error``; each carries
the status code it maps to.
"""

from fastapi import HTTPException, status


class ServiceError(ValueError):
    status_code = status.HTTP_400_BAD_REQUEST


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class PaymentProviderError(ServiceError):
    status_code = status.HTTP_502_BAD_GATEWAY


class InvalidStateTransition(ServiceError):
    status_code = status.HTTP_409_CONFLICT


class DuplicateReview(ServiceError):
    status_code = status.HTTP_409_CONFLICT


class SessionNotCompleted(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


def http_error(exc: ServiceError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=str(exc))
