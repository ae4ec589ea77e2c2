"""
Public, high-level helpers that wire configuration, the facilitator and the
core builders together.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import requests

from .core.codec import encode_payment
from .core.config import NegotiationConfig, load_negotiation_config
from .core.errors import ConfigError
from .core.facilitator import FacilitatorClient, supported_kinds_provider
from .core.requirements import build_payment_requirements, payment_required_response
from .core.signer import build_exact_evm_payload
from .core.types import PaymentRequiredResponse, PaymentRequirements

__all__ = [
    "advertise_requirements",
    "create_facilitator_client",
    "create_payment_header",
]


def create_facilitator_client(
    *,
    config: Optional[NegotiationConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    **parameters: Any,
) -> FacilitatorClient:
    """
    Construct a :class:`FacilitatorClient`.

    Callers can either supply a ready-made :class:`NegotiationConfig` or let
    the helper assemble one from environment data.
    """
    if config is not None:
        extras = (overrides, base, *parameters.values())
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built NegotiationConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_negotiation_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            **parameters,
        )
    return FacilitatorClient(cfg.facilitator_url, session=session)


async def advertise_requirements(
    config: NegotiationConfig,
    *,
    client: Optional[FacilitatorClient] = None,
    error: str = "",
) -> PaymentRequiredResponse:
    """
    Build the HTTP 402 body for the resource described by ``config``.

    The facilitator is only contacted for SVM networks, to discover the fee
    payer.
    """
    facilitator = client or FacilitatorClient(config.facilitator_url)
    requirements = await build_payment_requirements(
        config.requirements_input(),
        supported_kinds_provider(facilitator),
    )
    return payment_required_response(requirements, error=error)


def create_payment_header(
    requirements: PaymentRequirements,
    *,
    config: Optional[NegotiationConfig] = None,
    private_key: Optional[str] = None,
    now: Optional[int] = None,
    nonce: Optional[bytes] = None,
) -> str:
    """
    Sign ``requirements`` and return the ``X-PAYMENT`` header value.
    """
    key = private_key or (config.payer_private_key if config is not None else None)
    if not key:
        raise ConfigError("X402_PAYER_PRIVATE_KEY must be provided to sign a payment")
    payload = build_exact_evm_payload(requirements, key, now=now, nonce=nonce)
    return encode_payment(payload)
