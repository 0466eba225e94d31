"""
Error taxonomy shared by the proxy and the insight client

Every error carries the HTTP status the proxy answers with and an optional
``details`` payload that is attached to the JSON error body.
"""

from typing import Any, Optional


class AQVisionError(Exception):
    """Base class for all handled AQ-Vision failures"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_body(self) -> dict:
        """JSON error body: ``{error, details?}``"""
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidRequest(AQVisionError):
    """Missing or malformed query/body parameters"""

    status_code = 400


class UnknownInsightType(InvalidRequest):
    """Insight type that has no instruction template"""

    def __init__(self, insight_type: Any):
        super().__init__(f"Unknown insight type: {insight_type!r}")
        self.insight_type = insight_type


class UpstreamFailure(AQVisionError):
    """Non-success answer (or no answer) from a third-party API"""

    status_code = 502

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None,
        provider: Optional[str] = None
    ):
        super().__init__(message, status_code=status_code, details=details)
        self.provider = provider


class IncompleteData(AQVisionError):
    """A successful upstream payload lacks a field the flow requires"""

    status_code = 502


class ServerMisconfigured(AQVisionError):
    """A required credential is not configured"""

    status_code = 500
