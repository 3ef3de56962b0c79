"""Exception hierarchy for type change requests.

Every failure of a request surfaces as a ChangeTypeError subclass. The API
and CLI render these as a structured failure: kind, message and details.
"""

from typing import Any, Dict, Optional


class ChangeTypeError(Exception):
    """Base exception for all type change failures."""

    kind: str = "internal"
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details: Dict[str, Any] = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(ChangeTypeError):
    """Raised when the element mapping is malformed or ambiguous."""

    kind = "validation"
    status_code = 400


class NotFoundError(ChangeTypeError):
    """Raised when an item, type, element or workflow step does not exist."""

    kind = "not_found"
    status_code = 404


class RemoteCallError(ChangeTypeError):
    """Raised when a Management API call fails.

    Side effects of calls made earlier in the same request are not undone.
    """

    kind = "remote_call"
    status_code = 502

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        remote_status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.operation = operation
        self.remote_status = remote_status
        if operation:
            self.details.setdefault("operation", operation)
        if remote_status is not None:
            self.details.setdefault("remote_status", remote_status)


class ConfigurationError(ChangeTypeError):
    """Raised when the Management API connection is not configured."""

    kind = "configuration"
    status_code = 500
