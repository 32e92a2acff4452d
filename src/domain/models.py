"""
Data models for the unsubscribe domain.

These type-safe data structures define clear contracts between the
validator, the orchestrator and the Lambda entry point.
"""

import json
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

# CORS origin returned with every response (production pins the site origin)
ALLOWED_ORIGIN = os.environ.get('ALLOWED_ORIGIN', '*')


class ErrorKind(Enum):
    """Kinds of failure the unsubscribe pipeline can report."""
    TEMPLATE_LOAD = 'template_load'
    VALIDATION = 'validation'
    STORE_DELETION = 'store_deletion'

    @property
    def status_code(self) -> int:
        """HTTP status code a failure of this kind maps to."""
        if self is ErrorKind.VALIDATION:
            return 400
        return 500


class UnsubscribeError(Exception):
    """
    Tagged error carrying a kind and the underlying cause.

    Attributes:
        kind: ErrorKind identifying which pipeline step failed
        message: Human-readable description returned to the caller
        cause: Original exception (also chained as __cause__), if any
    """

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        kind: Optional[ErrorKind] = None
    ):
        super().__init__(message)
        if kind is not None:
            self.kind = kind
        elif not hasattr(self, 'kind'):
            raise TypeError("UnsubscribeError requires an ErrorKind")
        self.message = message
        self.cause = cause
        self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class TemplateLoadError(UnsubscribeError):
    """Raised when the confirmation template cannot be read or rendered."""
    kind = ErrorKind.TEMPLATE_LOAD


class ValidationError(UnsubscribeError):
    """Raised when request fields are missing or malformed."""
    kind = ErrorKind.VALIDATION


class StoreDeletionError(UnsubscribeError):
    """Raised when the subscription store fails to delete a record."""
    kind = ErrorKind.STORE_DELETION


@dataclass(frozen=True)
class UnsubscribeRequest:
    """
    Validated unsubscribe request.

    Attributes:
        id: Opaque subscriber identifier (never empty)
        email_address: Mailbox exactly as supplied by the caller
    """
    id: str
    email_address: str


@dataclass(frozen=True)
class ConfirmationTemplate:
    """
    Confirmation page prepared once per process and shared read-only.

    Attributes:
        name: Template name (e.g., "unsubscribe-successful")
        source: Raw template text
        rendered: Rendered HTML as UTF-8 bytes
    """
    name: str
    source: str
    rendered: bytes


@dataclass
class HandlerResponse:
    """
    Result of one unsubscribe invocation.

    This explicit result type makes success/failure handling clear and
    keeps exceptions from escaping the handler.

    Attributes:
        status_code: HTTP status code (200, 400 or 500)
        error: Error that ended the pipeline, if any
        body: Rendered template bytes, if attached
    """
    status_code: int
    error: Optional[UnsubscribeError] = None
    body: Optional[bytes] = None

    @classmethod
    def success(cls, body: bytes) -> 'HandlerResponse':
        return cls(status_code=200, body=body)

    @classmethod
    def failure(
        cls,
        error: UnsubscribeError,
        body: Optional[bytes] = None
    ) -> 'HandlerResponse':
        return cls(status_code=error.kind.status_code, error=error, body=body)

    @property
    def succeeded(self) -> bool:
        """Check if the request was fully handled without error."""
        return self.error is None

    def payload(self) -> Dict[str, Any]:
        """
        Build the JSON payload embedded in the proxy response.

        Returns:
            Dict with "error" and/or "data" keys, each present only when set
        """
        result: Dict[str, Any] = {}
        if self.error is not None:
            result['error'] = str(self.error)
        if self.body is not None:
            result['data'] = self.body.decode('utf-8')
        return result

    def to_api_gateway(self) -> Dict[str, Any]:
        """Convert to an API Gateway Lambda proxy response."""
        return {
            'statusCode': self.status_code,
            'headers': {
                'Content-Type': 'application/json',
                'Access-Control-Allow-Origin': ALLOWED_ORIGIN
            },
            'body': json.dumps(self.payload())
        }

    def __repr__(self) -> str:
        """Human-readable representation for logging."""
        if self.error is None:
            return f"HandlerResponse(status_code={self.status_code})"
        return (
            f"HandlerResponse(status_code={self.status_code}, "
            f"kind={self.error.kind.value}, error={self.error})"
        )
