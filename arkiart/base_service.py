import logging
from typing import Any, Dict, Optional
from fastapi.responses import JSONResponse
from sqlalchemy.exc import StatementError

from arkiart.config import LOG_LEVEL

# Setup logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(message)s",
)
logger = logging.getLogger("arkiart")


class EnvelopeResponse(JSONResponse):
    """
    Standard response envelope for all API endpoints.

    Successful responses carry ``success``, ``response`` and ``message``;
    failures additionally carry an ``error`` field (possibly null).
    """
    def __init__(
        self,
        response: Any = None,
        message: str = "",
        success: bool = True,
        error: Any = None,
        status_code: int = 200,
        **kwargs
    ):
        content = {
            "success": success,
            "response": response,
            "message": message,
        }
        if not success:
            content["error"] = error
        super().__init__(content=content, status_code=status_code, **kwargs)


class ServiceError(Exception):
    """
    Raised from dependencies to short-circuit a request with an envelope error.

    Converted to an EnvelopeResponse by the application exception handler.
    """
    def __init__(self, status_code: int, message: str, response: Any = None, error: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.response = response
        self.error = error

    def to_response(self) -> EnvelopeResponse:
        return EnvelopeResponse(
            response=self.response,
            message=self.message,
            success=False,
            error=self.error,
            status_code=self.status_code,
        )


def error_details(error: Exception) -> str:
    """Client-safe description of an exception: the class name only."""
    return type(error).__name__


class BaseService:
    """
    Base class for services. Provides:
    - Event and error logging
    - Envelope responses
    """
    def __init__(self, service_name: str = "core"):
        self.service_name = service_name
        self.logger = logging.getLogger(f"arkiart.{service_name}")

    def envelope(
        self,
        response: Any = None,
        message: str = "",
        status_code: int = 200
    ) -> EnvelopeResponse:
        """Return a successful envelope response."""
        return EnvelopeResponse(response=response, message=message, status_code=status_code)

    def failure(
        self,
        message: str,
        status_code: int,
        response: Any = None,
        error: Any = None
    ) -> EnvelopeResponse:
        """Return a failed envelope response."""
        return EnvelopeResponse(
            response=response,
            message=message,
            success=False,
            error=error,
            status_code=status_code,
        )

    def log_event(self, event: str, details: Optional[Dict[str, Any]] = None):
        self.logger.info(f"EVENT: {event} | Details: {details}")

    def log_error(self, error: Exception, context: str = ""):
        # Statement errors render their SQL parameters; log the driver error only
        if isinstance(error, StatementError) and error.orig is not None:
            detail = f"{type(error).__name__}: {error.orig}"
        else:
            detail = f"{type(error).__name__}: {error}"
        self.logger.error(f"ERROR: {detail} | Context: {context}")
