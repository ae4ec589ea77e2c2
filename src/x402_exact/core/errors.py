"""
Exception hierarchy for the x402 exact-scheme helpers.

Every failure surfaced by the codec, the requirements builder or the
facilitator client is an :class:`X402Error` subclass so HTTP callers can map
it to a response without inspecting messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

__all__ = [
    "ConfigError",
    "EncodingError",
    "FacilitatorError",
    "InvalidAddressError",
    "InvalidRequirementsError",
    "MalformedPayloadError",
    "MissingCollaboratorError",
    "MissingFeePayerError",
    "MissingFieldError",
    "PayloadValidationError",
    "PriceResolutionError",
    "SchemaIssue",
    "UnsupportedNetworkError",
    "X402Error",
]


class X402Error(Exception):
    """Base error for the x402 exact-scheme helpers."""

    http_status = 400


class ConfigError(X402Error):
    """Raised when the supplied configuration is invalid."""

    http_status = 500


class UnsupportedNetworkError(X402Error):
    """The network is in neither the EVM nor the SVM set."""

    def __init__(self, network: object) -> None:
        super().__init__(f"Unsupported network: {network}")
        self.network = network


class EncodingError(X402Error):
    """The transport encoding (base64 / UTF-8) could not be undone."""


class MalformedPayloadError(X402Error):
    """The decoded text is not parseable JSON."""


class MissingFieldError(X402Error):
    def __init__(self, field: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"Payment payload missing required '{field}' field")
        self.field = field


@dataclass(frozen=True)
class SchemaIssue:
    """A single schema diagnostic: dotted field path and the reason."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.reason}"


class PayloadValidationError(X402Error):
    """The assembled payload was rejected by the schema."""

    def __init__(self, issues: Sequence[SchemaIssue]) -> None:
        self.issues: List[SchemaIssue] = list(issues)
        details = "; ".join(str(issue) for issue in self.issues)
        super().__init__(f"Invalid payment payload: {details}")


class PriceResolutionError(X402Error):
    """The price could not be turned into an atomic amount."""

    http_status = 500


class InvalidAddressError(X402Error):
    http_status = 500

    def __init__(self, address: object, field_name: str = "address") -> None:
        super().__init__(f"{field_name} is not a valid EVM address: {address!r}")
        self.address = address
        self.field_name = field_name


class InvalidRequirementsError(X402Error):
    """The assembled payment requirements were rejected by the schema."""

    http_status = 500

    def __init__(self, issues: Sequence[SchemaIssue]) -> None:
        self.issues: List[SchemaIssue] = list(issues)
        details = "; ".join(str(issue) for issue in self.issues)
        super().__init__(f"Invalid payment requirements: {details}")


class MissingFeePayerError(X402Error):
    """The facilitator advertised no fee payer for an SVM network."""

    http_status = 500

    def __init__(self, network: str) -> None:
        super().__init__(
            f"The facilitator did not provide a fee payer for network: {network}."
        )
        self.network = network


class MissingCollaboratorError(X402Error):
    http_status = 500


class FacilitatorError(X402Error):
    """The facilitator answered with an error or an unreadable body."""

    http_status = 502

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
