"""
Client-side construction of an exact-scheme EVM payment payload.
"""

from __future__ import annotations

import secrets
import time
from typing import Any, Dict, Optional

from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_utils import to_hex
from hexbytes import HexBytes

from .errors import MissingFieldError, UnsupportedNetworkError
from .networks import chain_id, is_evm_network
from .types import (
    X402_VERSION,
    EvmAuthorization,
    EvmPaymentPayload,
    ExactEvmPayload,
    PaymentRequirements,
)

__all__ = [
    "build_exact_evm_payload",
    "transfer_with_authorization_typed_data",
]

DEFAULT_BACKDATE_SECONDS = 600


def transfer_with_authorization_typed_data(
    requirements: PaymentRequirements,
    message: Dict[str, Any],
) -> Dict[str, Any]:
    """EIP-712 typed data for an ERC-3009 ``TransferWithAuthorization``."""
    extra = requirements.extra or {}
    for key in ("name", "version"):
        if not extra.get(key):
            raise MissingFieldError(
                f"extra.{key}",
                f"Payment requirements must carry the asset's EIP-712 {key} in 'extra'",
            )

    return {
        "types": {
            "EIP712Domain": [
                {"name": "name", "type": "string"},
                {"name": "version", "type": "string"},
                {"name": "chainId", "type": "uint256"},
                {"name": "verifyingContract", "type": "address"},
            ],
            "TransferWithAuthorization": [
                {"name": "from", "type": "address"},
                {"name": "to", "type": "address"},
                {"name": "value", "type": "uint256"},
                {"name": "validAfter", "type": "uint256"},
                {"name": "validBefore", "type": "uint256"},
                {"name": "nonce", "type": "bytes32"},
            ],
        },
        "primaryType": "TransferWithAuthorization",
        "domain": {
            "name": extra["name"],
            "version": extra["version"],
            "chainId": chain_id(requirements.network),
            "verifyingContract": requirements.asset,
        },
        "message": message,
    }


def build_exact_evm_payload(
    requirements: PaymentRequirements,
    private_key: str,
    *,
    now: Optional[int] = None,
    nonce: Optional[bytes] = None,
    backdate_seconds: int = DEFAULT_BACKDATE_SECONDS,
) -> EvmPaymentPayload:
    """
    Sign a payment that satisfies ``requirements``.

    The numeric authorization fields are left as Python ints; the codec
    stringifies them on the way out.
    """
    if not is_evm_network(requirements.network):
        raise UnsupportedNetworkError(requirements.network)

    now = int(time.time()) if now is None else now
    nonce_bytes = nonce if nonce is not None else secrets.token_bytes(32)
    valid_after = now - backdate_seconds
    valid_before = now + requirements.max_timeout_seconds
    value = int(requirements.max_amount_required)

    account = Account.from_key(private_key)
    typed_data = transfer_with_authorization_typed_data(
        requirements,
        {
            "from": account.address,
            "to": requirements.pay_to,
            "value": value,
            "validAfter": valid_after,
            "validBefore": valid_before,
            "nonce": HexBytes(nonce_bytes),
        },
    )
    signable = encode_typed_data(full_message=typed_data)
    signature = account.sign_message(signable).signature

    return EvmPaymentPayload(
        x402_version=X402_VERSION,
        scheme="exact",
        network=requirements.network,
        payload=ExactEvmPayload(
            signature=to_hex(signature),
            authorization=EvmAuthorization(
                from_=account.address,
                to=requirements.pay_to,
                value=value,
                valid_after=valid_after,
                valid_before=valid_before,
                nonce="0x" + nonce_bytes.hex(),
            ),
        ),
    )
