from typing import Any, Mapping, Optional


class DietAuditError(Exception):
    """Base class for errors raised by the audit pipeline and its adapters.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, upstream info)
        code: machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Audit failed", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message, "code": self.code}
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(DietAuditError):
    """Raised when an input or upstream payload does not have the expected shape.

    ``field`` names the offending field so callers can tell which part of a
    payload failed. http_status is 422.
    """

    http_status = 422
    default_code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Invalid input", field: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        merged = dict(details or {})
        if field:
            merged.setdefault("field", field)
        super().__init__(message, merged or None, code)
        self.field = field


class UpstreamAPIError(DietAuditError):
    """Raised when an upstream service rejects a request or cannot be reached.

    ``status_code`` is 0 for transport failures (timeouts, DNS, refused
    connections). http_status is 502.
    """

    http_status = 502
    default_code = "API_ERROR"

    def __init__(self, message: str, status_code: int = 0, endpoint: str = "", response_body: Optional[str] = None):
        super().__init__(
            message,
            {"endpoint": endpoint, "status_code": status_code},
        )
        self.status_code = status_code
        self.endpoint = endpoint
        self.response_body = response_body


class NotFoundError(DietAuditError):
    """Raised when a requested resource was not found. http_status is 404."""

    http_status = 404
    default_code = "NOT_FOUND"

    def __init__(self, message: str = "Not found", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message, details, code)
