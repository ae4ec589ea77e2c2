"""
Encoding and decoding of the ``X-PAYMENT`` header value.

The wire form is base64 over compact JSON text. Integers inside an EVM
authorization are written as decimal strings because peers parse the JSON
with a float-based parser that cannot hold uint256 values.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict, Mapping, Union

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from .errors import (
    EncodingError,
    MalformedPayloadError,
    MissingFieldError,
    PayloadValidationError,
)
from .networks import NetworkFamily, network_family
from .types import EvmPaymentPayload, PaymentPayloadSchema, SvmPaymentPayload, schema_issues

__all__ = [
    "decode_payment",
    "encode_payment",
    "payment_to_wire",
    "safe_base64_decode",
    "safe_base64_encode",
]

PaymentLike = Union[EvmPaymentPayload, SvmPaymentPayload, Mapping[str, Any]]


def safe_base64_encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def safe_base64_decode(text: str) -> str:
    """
    Undo :func:`safe_base64_encode`.

    Raises :class:`EncodingError` for anything that is not strict base64 over
    UTF-8 text.
    """
    if not isinstance(text, str):
        raise EncodingError(f"Payment header must be a string, got {type(text).__name__}")
    try:
        raw = base64.b64decode(text.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise EncodingError(f"Payment header is not valid base64: {exc}") from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise EncodingError(f"Payment header is not UTF-8 text: {exc}") from exc


def _as_document(payment: PaymentLike) -> Dict[str, Any]:
    if isinstance(payment, BaseModel):
        return payment.model_dump(by_alias=True)
    if isinstance(payment, Mapping):
        return dict(payment)
    raise TypeError(f"Cannot encode {type(payment).__name__} as a payment payload")


def _stringify_integers(values: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        key: str(value) if isinstance(value, int) and not isinstance(value, bool) else value
        for key, value in values.items()
    }


def payment_to_wire(payment: PaymentLike) -> Dict[str, Any]:
    """Return the JSON-ready form of ``payment`` with EVM integers stringified."""
    document = _as_document(payment)
    family = network_family(document.get("network"))

    if family is NetworkFamily.EVM:
        evm_payload = dict(document.get("payload") or {})
        evm_payload["authorization"] = _stringify_integers(evm_payload.get("authorization") or {})
        document["payload"] = evm_payload
    return document


def encode_payment(payment: PaymentLike) -> str:
    """
    Encode a payment payload into its base64 header form.

    The output depends only on the input: key order is taken from the
    payload as constructed and is not re-sorted.
    """
    text = json.dumps(payment_to_wire(payment), separators=(",", ":"), ensure_ascii=False)
    return safe_base64_encode(text)


def decode_payment(encoded: str) -> Union[EvmPaymentPayload, SvmPaymentPayload]:
    """
    Decode and validate an ``X-PAYMENT`` header value.

    Integers that were stringified on encode stay strings. Every returned
    payload has passed :data:`PaymentPayloadSchema`.
    """
    text = safe_base64_decode(encoded)

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedPayloadError(f"Failed to parse payment payload: {exc}") from exc

    if not isinstance(parsed, dict):
        raise MissingFieldError("network", "Payment payload must be a valid object")

    network = parsed.get("network")
    if not network or not isinstance(network, str):
        raise MissingFieldError("network")

    family = network_family(network)
    tagged = dict(parsed)
    tagged["kind"] = family.value

    try:
        return PaymentPayloadSchema.validate_python(tagged)
    except SchemaError as exc:
        raise PayloadValidationError(schema_issues(exc)) from exc
