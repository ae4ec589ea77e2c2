"""
Wire types for the x402 exact scheme.

The models use camelCase aliases on the wire and snake_case attributes in
Python. A payment payload is modelled as a tagged union (``kind`` is ``"evm"``
or ``"svm"``); the tag is derived from the network at the decoding boundary
and is never written back out, so peers that only send ``network`` stay
compatible.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .errors import SchemaIssue
from .networks import KNOWN_NETWORKS, NetworkFamily, is_evm_network, is_svm_network

__all__ = [
    "EvmAuthorization",
    "EvmPaymentPayload",
    "ExactEvmPayload",
    "ExactSvmPayload",
    "PAYMENT_HEADER",
    "PaymentPayload",
    "PaymentPayloadSchema",
    "PaymentRequiredResponse",
    "PaymentRequirements",
    "SupportedPaymentKind",
    "SupportedPaymentKindsResponse",
    "SvmPaymentPayload",
    "Uint256",
    "X402_VERSION",
    "schema_issues",
]

X402_VERSION = 1
PAYMENT_HEADER = "X-PAYMENT"

_MAX_UINT256 = 2**256 - 1
# Matched with fullmatch so a trailing newline is rejected.
_DIGITS = re.compile(r"[0-9]+")
_EVM_ADDRESS = re.compile(r"0x[0-9a-fA-F]{40}")
_HEX = re.compile(r"0x[0-9a-fA-F]+")
_NONCE = re.compile(r"0x[0-9a-fA-F]{64}")
_BASE64 = re.compile(r"[A-Za-z0-9+/]*={0,2}")


def _check_uint256(value: Union[int, str]) -> Union[int, str]:
    if isinstance(value, str):
        if not _DIGITS.fullmatch(value):
            raise ValueError("must be a non-negative decimal integer string")
        as_int = int(value)
    else:
        as_int = value
    if as_int < 0:
        raise ValueError("must not be negative")
    if as_int > _MAX_UINT256:
        raise ValueError("must fit in 256 bits")
    return value


# Either a native int or its decimal string; the representation is kept as is.
Uint256 = Annotated[Union[StrictInt, StrictStr], AfterValidator(_check_uint256)]


def _pattern(regex: "re.Pattern[str]", message: str):
    def check(value: str) -> str:
        if not regex.fullmatch(value):
            raise ValueError(message)
        return value

    return AfterValidator(check)


EvmAddress = Annotated[StrictStr, _pattern(_EVM_ADDRESS, "must be a 0x-prefixed 20 byte hex address")]


class X402Model(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class EvmAuthorization(X402Model):
    """ERC-3009 ``TransferWithAuthorization`` parameters."""

    from_: EvmAddress = Field(alias="from")
    to: EvmAddress
    value: Uint256
    valid_after: Uint256
    valid_before: Uint256
    nonce: Annotated[StrictStr, _pattern(_NONCE, "must be a 0x-prefixed 32 byte hex string")]


class ExactEvmPayload(X402Model):
    signature: Annotated[StrictStr, _pattern(_HEX, "must be a 0x-prefixed hex string")]
    authorization: EvmAuthorization


class ExactSvmPayload(X402Model):
    transaction: Annotated[StrictStr, _pattern(_BASE64, "must be a base64 encoded transaction")]


class _BasePaymentPayload(X402Model):
    # Unknown top-level protocol metadata is kept and re-emitted on encode.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    x402_version: StrictInt = Field(alias="x402Version")
    scheme: Literal["exact"]
    network: StrictStr


class EvmPaymentPayload(_BasePaymentPayload):
    kind: Literal["evm"] = Field(default="evm", exclude=True)
    payload: ExactEvmPayload

    @model_validator(mode="after")
    def check_network_is_evm(self) -> "EvmPaymentPayload":
        if not is_evm_network(self.network):
            raise ValueError(f"network '{self.network}' is not an EVM network")
        return self


class SvmPaymentPayload(_BasePaymentPayload):
    kind: Literal["svm"] = Field(default="svm", exclude=True)
    payload: ExactSvmPayload

    @model_validator(mode="after")
    def check_network_is_svm(self) -> "SvmPaymentPayload":
        if not is_svm_network(self.network):
            raise ValueError(f"network '{self.network}' is not an SVM network")
        return self


PaymentPayload = Annotated[
    Union[EvmPaymentPayload, SvmPaymentPayload],
    Field(discriminator="kind"),
]

PaymentPayloadSchema: TypeAdapter = TypeAdapter(PaymentPayload)


class PaymentRequirements(X402Model):
    """What a server demands before it serves ``resource``."""

    scheme: Literal["exact"] = "exact"
    network: str
    max_amount_required: str
    resource: str
    description: str
    mime_type: str
    pay_to: str
    max_timeout_seconds: int
    asset: str
    output_schema: Optional[Dict[str, Any]] = None
    extra: Optional[Dict[str, Any]] = None

    @field_validator("network")
    @classmethod
    def check_known_network(cls, value: str) -> str:
        if value not in KNOWN_NETWORKS:
            raise ValueError(f"unknown network '{value}'")
        return value

    @field_validator("max_amount_required")
    @classmethod
    def check_atomic_amount(cls, value: str) -> str:
        if not _DIGITS.fullmatch(value):
            raise ValueError("must be a non-negative decimal integer string")
        return value

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PaymentRequiredResponse(X402Model):
    """Body of an HTTP 402 response."""

    x402_version: int = Field(default=X402_VERSION, alias="x402Version")
    accepts: List[PaymentRequirements]
    error: str = ""

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SupportedPaymentKind(X402Model):
    x402_version: int = Field(default=X402_VERSION, alias="x402Version")
    scheme: str
    network: str
    extra: Optional[Dict[str, Any]] = None


class SupportedPaymentKindsResponse(X402Model):
    """Capabilities advertised by a facilitator's ``/supported`` endpoint."""

    kinds: List[SupportedPaymentKind] = Field(default_factory=list)


def schema_issues(error: ValidationError) -> List[SchemaIssue]:
    """Flatten a pydantic error into dotted-path :class:`SchemaIssue` items."""
    issues = []
    for detail in error.errors():
        location = list(detail.get("loc", ()))
        # The first element of a discriminated-union location is the tag.
        if location and location[0] in (NetworkFamily.EVM.value, NetworkFamily.SVM.value):
            location = location[1:]
        path = ".".join(str(part) for part in location)
        issues.append(SchemaIssue(path=path, reason=detail.get("msg", "invalid")))
    return issues
