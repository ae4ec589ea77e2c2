"""
Builders for the ``PaymentRequirements`` a server advertises in a 402 response.

EVM and SVM networks follow different rules: EVM addresses are checksummed
and ``extra`` carries the asset's EIP-712 domain, while SVM addresses are
passed through and ``extra`` carries the fee payer advertised by the
facilitator.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Union

from eth_utils import is_address, to_checksum_address
from pydantic import ValidationError as SchemaError

from ..log import create_logger
from .errors import (
    FacilitatorError,
    InvalidAddressError,
    InvalidRequirementsError,
    MissingCollaboratorError,
    MissingFeePayerError,
    PriceResolutionError,
    SchemaIssue,
    UnsupportedNetworkError,
)
from .networks import is_evm_network, is_svm_network
from .pricing import (
    AtomicAmount,
    Price,
    PriceResolutionFailure,
    PriceResolver,
    process_price_to_atomic_amount,
)
from .types import (
    PaymentRequiredResponse,
    PaymentRequirements,
    SupportedPaymentKindsResponse,
    schema_issues,
)

__all__ = [
    "PaymentRequirementsInput",
    "SupportedKindsProvider",
    "build_evm_payment_requirements",
    "build_payment_requirements",
    "build_svm_payment_requirements",
    "payment_required_response",
]

_logger = create_logger("requirements")

SupportedKindsProvider = Callable[[], Awaitable[Union[SupportedPaymentKindsResponse, Mapping[str, Any]]]]

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True)
class PaymentRequirementsInput:
    """
    Everything a server knows about a paid resource.

    Optional fields left as ``None`` take the per-family defaults of the
    builders.
    """

    pay_to: str
    network: str
    price: Price
    resource: str
    method: str
    description: Optional[str] = None
    mime_type: Optional[str] = None
    max_timeout_seconds: Optional[int] = None
    input_schema: Optional[Mapping[str, Any]] = None
    output_schema: Optional[Mapping[str, Any]] = None
    discoverable: Optional[bool] = None

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "PaymentRequirementsInput":
        """Accept either camelCase (``payTo``) or snake_case (``pay_to``) keys."""
        known = {item.name for item in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in values.items():
            name = _CAMEL_BOUNDARY.sub("_", key).lower()
            if name not in known:
                raise TypeError(f"Unknown payment requirements parameter '{key}'")
            kwargs[name] = value
        try:
            return cls(**kwargs)
        except TypeError as exc:
            raise TypeError(f"Incomplete payment requirements input: {exc}") from exc


RequirementsInput = Union[PaymentRequirementsInput, Mapping[str, Any]]


def _coerce_input(value: RequirementsInput) -> PaymentRequirementsInput:
    if isinstance(value, PaymentRequirementsInput):
        return value
    return PaymentRequirementsInput.from_mapping(value)


def _resolve_price(request: PaymentRequirementsInput, price_resolver: PriceResolver) -> AtomicAmount:
    resolved = price_resolver(request.price, request.network)
    if isinstance(resolved, PriceResolutionFailure):
        raise PriceResolutionError(resolved.error)
    return resolved


def _checksum(address: Any, field_name: str) -> str:
    if not isinstance(address, str) or not is_address(address):
        raise InvalidAddressError(address, field_name)
    return to_checksum_address(address)


def _requirements(**values: Any) -> PaymentRequirements:
    try:
        return PaymentRequirements(**values)
    except SchemaError as exc:
        raise InvalidRequirementsError(schema_issues(exc)) from exc


def _supported_kinds(
    supported_kinds: Union[SupportedPaymentKindsResponse, Mapping[str, Any]],
) -> SupportedPaymentKindsResponse:
    if isinstance(supported_kinds, SupportedPaymentKindsResponse):
        return supported_kinds
    try:
        return SupportedPaymentKindsResponse.model_validate(supported_kinds)
    except SchemaError as exc:
        raise FacilitatorError(f"Invalid supported payment kinds: {exc}") from exc


def _output_schema(request: PaymentRequirementsInput) -> Dict[str, Any]:
    if not isinstance(request.method, str):
        raise InvalidRequirementsError([SchemaIssue(path="method", reason="Input should be a valid string")])
    http_input: Dict[str, Any] = {
        "type": "http",
        "method": request.method.upper(),
        "discoverable": True if request.discoverable is None else request.discoverable,
    }
    http_input.update(request.input_schema or {})
    schema: Dict[str, Any] = {"input": http_input}
    if request.output_schema is not None:
        schema["output"] = dict(request.output_schema)
    return schema


def _default(value: Any, fallback: Any) -> Any:
    return fallback if value is None else value


def build_evm_payment_requirements(
    request: RequirementsInput,
    *,
    price_resolver: PriceResolver = process_price_to_atomic_amount,
) -> PaymentRequirements:
    request = _coerce_input(request)
    atomic = _resolve_price(request, price_resolver)

    requirements = _requirements(
        scheme="exact",
        network=request.network,
        max_amount_required=atomic.max_amount_required,
        resource=request.resource,
        description=_default(request.description, ""),
        mime_type=_default(request.mime_type, "application/json"),
        pay_to=_checksum(request.pay_to, "payTo"),
        max_timeout_seconds=_default(request.max_timeout_seconds, 60),
        asset=_checksum(atomic.asset.address, "asset"),
        output_schema=_output_schema(request),
        extra=dict(atomic.asset.eip712) if atomic.asset.eip712 is not None else None,
    )
    _logger.debug(
        "Built EVM payment requirements",
        {"operation": "build_requirements", "network": request.network, "amount": atomic.max_amount_required},
    )
    return requirements


def _find_fee_payer(supported: SupportedPaymentKindsResponse, network: str) -> Optional[str]:
    for kind in supported.kinds:
        if kind.network == network and kind.scheme == "exact":
            fee_payer = (kind.extra or {}).get("feePayer")
            return fee_payer if isinstance(fee_payer, str) and fee_payer else None
    return None


def build_svm_payment_requirements(
    request: RequirementsInput,
    supported_kinds: Union[SupportedPaymentKindsResponse, Mapping[str, Any]],
    *,
    price_resolver: PriceResolver = process_price_to_atomic_amount,
) -> PaymentRequirements:
    """
    Build requirements for an SVM network.

    The fee payer comes from the first ``exact`` kind the facilitator
    advertises for the network; without one the payment cannot be made and
    :class:`MissingFeePayerError` is raised.
    """
    request = _coerce_input(request)
    atomic = _resolve_price(request, price_resolver)

    fee_payer = _find_fee_payer(_supported_kinds(supported_kinds), request.network)
    if fee_payer is None:
        raise MissingFeePayerError(request.network)

    requirements = _requirements(
        scheme="exact",
        network=request.network,
        max_amount_required=atomic.max_amount_required,
        resource=request.resource,
        description=_default(request.description, ""),
        mime_type=_default(request.mime_type, ""),
        pay_to=request.pay_to,
        max_timeout_seconds=_default(request.max_timeout_seconds, 60),
        asset=atomic.asset.address,
        output_schema=_output_schema(request),
        extra={"feePayer": fee_payer},
    )
    _logger.debug(
        "Built SVM payment requirements",
        {"operation": "build_requirements", "network": request.network, "feePayer": fee_payer},
    )
    return requirements


async def build_payment_requirements(
    request: RequirementsInput,
    get_supported_kinds: Optional[SupportedKindsProvider] = None,
    *,
    price_resolver: PriceResolver = process_price_to_atomic_amount,
) -> List[PaymentRequirements]:
    """
    Build the requirements for ``request`` according to its network family.

    ``get_supported_kinds`` is only needed (and only awaited, once) for SVM
    networks. A list is returned so a resource can later be offered on more
    than one asset.
    """
    request = _coerce_input(request)
    network = request.network

    if is_evm_network(network):
        return [build_evm_payment_requirements(request, price_resolver=price_resolver)]

    if is_svm_network(network):
        if get_supported_kinds is None:
            raise MissingCollaboratorError("get_supported_kinds is required for SVM networks")
        _logger.info(
            "Fetching supported payment kinds for fee payer",
            {"operation": "fee_payer_discovery", "network": network},
        )
        supported_kinds = await get_supported_kinds()
        return [build_svm_payment_requirements(request, supported_kinds, price_resolver=price_resolver)]

    raise UnsupportedNetworkError(network)


def payment_required_response(
    requirements: Sequence[PaymentRequirements],
    error: str = "",
) -> PaymentRequiredResponse:
    return PaymentRequiredResponse(accepts=list(requirements), error=error)
