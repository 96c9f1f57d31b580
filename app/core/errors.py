from typing import Optional

from fastapi import HTTPException, status


class ServiceError(Exception):
    """Errore di dominio: un tipo (kind) e un motivo breve leggibile da macchina."""

    kind = "service_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, reason: str, field: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.field = field

    def to_dict(self) -> dict:
        return {"error": self.kind, "reason": self.reason, "field": self.field}


class ValidationError(ServiceError):
    kind = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ServiceError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class AccessDeniedError(ServiceError):
    kind = "access_denied"
    status_code = status.HTTP_403_FORBIDDEN


class DuplicateError(ServiceError):
    kind = "duplicate"
    status_code = status.HTTP_409_CONFLICT


def to_http_exception(err: ServiceError) -> HTTPException:
    return HTTPException(status_code=err.status_code, detail=err.to_dict())
