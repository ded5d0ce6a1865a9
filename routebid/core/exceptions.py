# routebid/core/exceptions.py
from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class DomainError(HTTPException):
    """
    Error de negocio visible para quien llama.

    El ``detail`` siempre incluye ``error_code`` y ``message`` más el contexto
    que permita decidir si reintentar, refrescar o abandonar
    (``current_status``, ``target_status``, ``field``...).
    """
    http_status: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context: Dict[str, Any] = {k: v for k, v in context.items() if v is not None}
        super().__init__(
            status_code=self.http_status,
            detail={"error_code": self.error_code, "message": message, **self.context}
        )

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


class NotFoundError(DomainError):
    http_status = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"


class ForbiddenError(DomainError):
    http_status = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"


class InvalidTransitionError(DomainError):
    http_status = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_TRANSITION"

    def __init__(
        self,
        message: str,
        current_status: Optional[str] = None,
        target_status: Optional[str] = None,
        **context: Any
    ):
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(message, current_status=current_status, target_status=target_status, **context)


class ConflictError(InvalidTransitionError):
    """Se perdió la carrera por una asignación exclusiva"""
    http_status = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"


class OrderValidationError(DomainError):
    http_status = 422
    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None, **context: Any):
        self.field = field
        super().__init__(message, field=field, **context)
