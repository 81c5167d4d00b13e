"""
Error types for the ABA Coach API.
Every error raised by a route is rendered as a JSON envelope by api_server.
"""

from typing import Any, Dict, Optional


class RelayError(Exception):
    """Base error carrying the HTTP status and the client-facing message."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message}


class MethodNotAllowedError(RelayError):
    """Raised for any method other than POST."""

    status_code = 405

    def __init__(self, message: str = "Method not allowed"):
        super().__init__(message)


class ServerMisconfigurationError(RelayError):
    """Raised when GEMINI_API_KEY is not configured on the server."""

    status_code = 500


class BadRequestError(RelayError):
    """Raised for a missing or invalid request field."""

    status_code = 400


class InternalError(RelayError):
    """Any other failure: malformed JSON, network faults, SDK errors."""

    status_code = 500


class UpstreamError(RelayError):
    """
    Non-2xx response from the Gemini REST API.
    Rendered with the upstream status and body exactly as received.
    """

    def __init__(self, status_code: int, body: Any):
        super().__init__(f"Upstream returned {status_code}", status_code=status_code)
        self.body = body

    def to_body(self) -> Any:
        return self.body
