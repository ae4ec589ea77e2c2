"""
HTTP client helpers for the x402 facilitator.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, Optional, Union

import requests
from pydantic import ValidationError as SchemaError

from ..log import create_logger
from .codec import payment_to_wire
from .errors import FacilitatorError
from .types import (
    X402_VERSION,
    EvmPaymentPayload,
    PaymentRequirements,
    SupportedPaymentKindsResponse,
    SvmPaymentPayload,
)

__all__ = [
    "FacilitatorClient",
    "supported_kinds_provider",
]

_logger = create_logger("facilitator")


def _read_json(response: requests.Response, url: str) -> Dict[str, Any]:
    if response.status_code >= 400:
        raise FacilitatorError(
            f"Facilitator responded with {response.status_code}: {response.text}",
            status_code=response.status_code,
        )
    try:
        return response.json()
    except (json.JSONDecodeError, ValueError) as exc:
        raise FacilitatorError(
            f"Failed to parse JSON from facilitator at {url}: {response.text}",
            status_code=response.status_code,
        ) from exc


class FacilitatorClient:
    """
    Thin wrapper around the facilitator's ``/supported`` and ``/verify`` endpoints.
    """

    def __init__(
        self,
        url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ) -> None:
        self.url = url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def supported(self) -> SupportedPaymentKindsResponse:
        supported_url = f"{self.url}/supported"
        _logger.info("Fetching supported payment kinds", {"operation": "supported", "url": supported_url})
        response = self.session.get(supported_url, timeout=self.timeout)
        body = _read_json(response, supported_url)
        try:
            return SupportedPaymentKindsResponse.model_validate(body)
        except SchemaError as exc:
            raise FacilitatorError(
                f"Facilitator at {supported_url} returned an invalid supported kinds list: {exc}"
            ) from exc

    def verify(
        self,
        payment: Union[EvmPaymentPayload, SvmPaymentPayload],
        requirements: PaymentRequirements,
    ) -> Dict[str, Any]:
        """
        Ask the facilitator whether ``payment`` satisfies ``requirements``.

        The raw response (``isValid``, ``invalidReason``, ``payer``) is returned
        unchanged.
        """
        verify_url = f"{self.url}/verify"
        body = {
            "x402Version": X402_VERSION,
            "paymentPayload": payment_to_wire(payment),
            "paymentRequirements": requirements.to_wire(),
        }
        _logger.info(
            "Submitting payment for verification",
            {"operation": "verify", "url": verify_url, "network": requirements.network},
        )
        response = self.session.post(verify_url, json=body, timeout=self.timeout)
        return _read_json(response, verify_url)


def supported_kinds_provider(client: FacilitatorClient):
    """
    Adapt ``client`` to the async zero-argument accessor expected by
    :func:`x402_exact.core.requirements.build_payment_requirements`.
    """

    async def get_supported_kinds() -> SupportedPaymentKindsResponse:
        return await asyncio.to_thread(client.supported)

    return get_supported_kinds
