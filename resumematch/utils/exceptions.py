"""
Custom Exception Classes for the Resume Matching Engine

Every engine error carries a stable ``error_code``, a ``details`` mapping for
logs and API responses, and the underlying ``cause`` when one exists.
"""
import asyncio
import functools
import inspect
import time
from random import uniform
from typing import Any, Dict, Optional

from fastapi import HTTPException


def _details(details: Optional[Dict[str, Any]], **fields) -> Dict[str, Any]:
    merged = dict(details or {})
    merged.update({key: value for key, value in fields.items() if value is not None})
    return merged


class ResumeMatchBaseException(Exception):
    """Base exception for the resume matching engine"""

    default_code = "RESUMEMATCH_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view used in logs and error responses"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(ResumeMatchBaseException):
    """Input that cannot be processed (blank text, malformed values)"""

    default_code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str, field: str = None, value: Any = None, details: Dict[str, Any] = None, **kwargs):
        invalid = None if value is None else str(value)
        super().__init__(message, details=_details(details, field=field, invalid_value=invalid), **kwargs)


class ConfigurationError(ResumeMatchBaseException):
    """Invalid engine configuration: weights, thresholds, lookup tables"""

    default_code = "CONFIGURATION_ERROR"
    status_code = 400

    def __init__(self, message: str, config_key: str = None, config_value: Any = None, details: Dict[str, Any] = None, **kwargs):
        value = None if config_value is None else str(config_value)
        super().__init__(message, details=_details(details, config_key=config_key, config_value=value), **kwargs)


class ProcessingError(ResumeMatchBaseException):
    """Scoring or analysis of a document failed unexpectedly"""

    default_code = "PROCESSING_ERROR"
    status_code = 500

    def __init__(self, message: str, document_id: str = None, document_type: str = None, details: Dict[str, Any] = None, **kwargs):
        super().__init__(
            message, details=_details(details, document_id=document_id, document_type=document_type), **kwargs
        )


class ExternalServiceError(ResumeMatchBaseException):
    """The embedding provider could not be reached or answered badly"""

    default_code = "EXTERNAL_SERVICE_ERROR"
    status_code = 502

    def __init__(self, message: str, service_name: str = None, status_code: int = None, details: Dict[str, Any] = None, **kwargs):
        super().__init__(
            message, details=_details(details, service_name=service_name, status_code=status_code or None), **kwargs
        )


def map_to_http_exception(exc: ResumeMatchBaseException) -> HTTPException:
    """400 for validation/configuration, 500 for processing, 502 for the embedding provider"""
    return HTTPException(
        status_code=exc.status_code,
        detail={"error": exc.to_dict(), "message": exc.message},
    )


class ExceptionContext:
    """
    Wraps one engine operation: logs start, completion and failure, passes
    engine exceptions through, turns KeyError/ValueError/TypeError into
    ValidationError and anything else into ProcessingError.
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

        if isinstance(exc_val, ResumeMatchBaseException) or not isinstance(exc_val, Exception):
            return False

        if isinstance(exc_val, (KeyError, ValueError, TypeError)):
            wrapper = ValidationError(f"Invalid input for {self.operation}: {exc_val}", details=dict(self.context), cause=exc_val)
        else:
            wrapper = ProcessingError(f"Processing error in {self.operation}: {exc_val}", details=dict(self.context), cause=exc_val)
        raise wrapper from exc_val


def _backoff_delay(attempt: int, backoff_factor: float) -> float:
    return backoff_factor * (2 ** attempt) + uniform(0, 1)


def retry_with_logging(
    max_attempts: int = 3,
    backoff_factor: float = 1.0,
    exceptions: tuple = (Exception,),
    logger=None
):
    """Retry a sync or async callable with exponential backoff and jitter, re-raising the last error"""

    def report(func, attempt, error):
        if not logger:
            return
        logger.warning(f"Attempt {attempt + 1}/{max_attempts} failed for {func.__name__}: {error}")
        if attempt == max_attempts - 1:
            logger.error(f"All {max_attempts} attempts failed for {func.__name__}")

    def decorator(func):
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                for attempt in range(max_attempts):
                    try:
                        return await func(*args, **kwargs)
                    except exceptions as e:
                        report(func, attempt, e)
                        if attempt == max_attempts - 1:
                            raise
                        await asyncio.sleep(_backoff_delay(attempt, backoff_factor))
            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    report(func, attempt, e)
                    if attempt == max_attempts - 1:
                        raise
                    time.sleep(_backoff_delay(attempt, backoff_factor))
        return sync_wrapper

    return decorator
