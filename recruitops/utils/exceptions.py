"""
Custom Exception Classes for the RecruitOps API

Each class carries its error code and HTTP status; keyword arguments named
in ``detail_fields`` are folded into ``details`` so the error envelope shows
which candidate, collection or platform was involved.
"""
from typing import Dict, Any, Tuple

from fastapi import HTTPException
from pymongo.errors import PyMongoError


class RecruitOpsBaseException(Exception):
    """Base exception for the RecruitOps API"""

    error_code = "RECRUITOPS_ERROR"
    http_status = 500
    detail_fields: Tuple[str, ...] = ()

    def __init__(
        self,
        message: str,
        details: Dict[str, Any] = None,
        cause: Exception = None,
        error_code: str = None,
        **fields
    ):
        unknown = set(fields) - set(self.detail_fields)
        if unknown:
            raise TypeError(f"{self.__class__.__name__} got unexpected fields: {', '.join(sorted(unknown))}")

        self.message = message
        self.error_code = error_code or self.error_code
        self.details = dict(details or {})
        for name in self.detail_fields:
            value = fields.get(name)
            if value is not None and value != "":
                self.details[name] = value if isinstance(value, (int, float, bool, list, dict)) else str(value)
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(RecruitOpsBaseException):
    """Raised when request data is missing or unusable (short JD, no file, unknown stage)"""
    error_code = "VALIDATION_ERROR"
    http_status = 400
    detail_fields = ("field", "value")


class BusinessLogicError(RecruitOpsBaseException):
    """Raised when a lifecycle rule is violated"""
    error_code = "BUSINESS_LOGIC_ERROR"
    http_status = 400
    detail_fields = ("rule",)


class NotFoundError(RecruitOpsBaseException):
    """Raised when a candidate or stored document does not exist"""
    error_code = "NOT_FOUND"
    http_status = 404
    detail_fields = ("entity", "entity_id")


class RateLimitError(RecruitOpsBaseException):
    """Raised when the search provider rate-limits us"""
    error_code = "RATE_LIMIT_ERROR"
    http_status = 429
    detail_fields = ("service_name",)


class DatabaseError(RecruitOpsBaseException):
    """Raised when storage operations fail"""
    error_code = "DATABASE_ERROR"
    detail_fields = ("operation", "collection")


class ModelError(RecruitOpsBaseException):
    """Raised when LLM-assisted extraction fails"""
    error_code = "MODEL_ERROR"
    detail_fields = ("model_name",)


class ProcessingError(RecruitOpsBaseException):
    """Raised when a document or candidate cannot be processed"""
    error_code = "PROCESSING_ERROR"
    detail_fields = ("operation",)


class ExternalServiceError(RecruitOpsBaseException):
    """Raised when an external collaborator (search provider, LLM host) fails"""
    error_code = "EXTERNAL_SERVICE_ERROR"
    http_status = 502
    detail_fields = ("service_name", "status_code")


def map_to_http_exception(exc: RecruitOpsBaseException) -> HTTPException:
    """Map custom exceptions to HTTP exceptions"""
    detail = {
        "error": exc.to_dict(),
        "message": exc.message
    }
    return HTTPException(status_code=exc.http_status, detail=detail)


class ExceptionContext:
    """Context manager for database work inside an endpoint.

    Our own and HTTP exceptions pass through; anything else is re-raised as a
    typed error so the middleware can map it.
    """

    def __init__(self, operation: str, logger=None, **context):
        self.operation = operation
        self.logger = logger
        self.context = context

    def __enter__(self):
        if self.logger:
            self.logger.debug(f"Starting operation: {self.operation}", extra=self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            if self.logger:
                self.logger.debug(f"Operation completed: {self.operation}", extra=self.context)
            return False

        if self.logger:
            self.logger.error(
                f"Operation failed: {self.operation} - {exc_val}",
                extra={**self.context, "exception_type": exc_type.__name__}
            )

        if isinstance(exc_val, (RecruitOpsBaseException, HTTPException)):
            return False

        details = dict(self.context)
        if isinstance(exc_val, PyMongoError):
            raise DatabaseError(
                f"Database error in {self.operation}: {exc_val}",
                operation=self.operation, details=details, cause=exc_val
            ) from exc_val
        if isinstance(exc_val, (KeyError, ValueError, TypeError)):
            raise ValidationError(
                f"Validation error in {self.operation}: {exc_val}",
                details=details, cause=exc_val
            ) from exc_val
        raise ProcessingError(
            f"Processing error in {self.operation}: {exc_val}",
            operation=self.operation, details=details, cause=exc_val
        ) from exc_val
