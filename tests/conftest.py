"""Shared pytest fixtures for x402_exact tests."""

import pytest
from eth_account import Account

from x402_exact.core.types import SupportedPaymentKindsResponse

PAY_TO = "0x209693bc6afc0c5328ba36faf03c514ef312287c"
SOLANA_PAY_TO = "2wKupLR9q6wXYppw8Gr2NvWxKBUqm4PPJKkQfoxHDBg4"
SOLANA_FEE_PAYER = "EwWqGE4ZFKLofuestmU4LDdK7XM1N4ALgdZccwYugwGd"


@pytest.fixture
def test_account():
    """Create a test Ethereum account."""
    # Deterministic key for reproducible signatures
    return Account.from_key("0x" + "1" * 64)


@pytest.fixture
def evm_request():
    """Minimal camelCase request descriptor for an EVM network."""
    return {
        "payTo": PAY_TO,
        "network": "base",
        "price": "$0.01",
        "resource": "https://x/y",
        "method": "get",
    }


@pytest.fixture
def svm_request():
    return {
        "payTo": SOLANA_PAY_TO,
        "network": "solana-devnet",
        "price": "$0.01",
        "resource": "https://x/y",
        "method": "post",
    }


@pytest.fixture
def supported_kinds():
    """Facilitator capabilities advertising a fee payer on solana-devnet."""
    return SupportedPaymentKindsResponse.model_validate(
        {
            "kinds": [
                {"x402Version": 1, "scheme": "exact", "network": "base-sepolia"},
                {
                    "x402Version": 1,
                    "scheme": "exact",
                    "network": "solana-devnet",
                    "extra": {"feePayer": SOLANA_FEE_PAYER},
                },
            ]
        }
    )


@pytest.fixture
def evm_payment_document():
    """An EVM payment payload as a plain mapping with native integers."""
    return {
        "x402Version": 1,
        "scheme": "exact",
        "network": "base-sepolia",
        "payload": {
            "signature": "0x" + "ab" * 65,
            "authorization": {
                "from": "0x" + "1" * 40,
                "to": "0x" + "2" * 40,
                "value": 10000,
                "validAfter": 1740672089,
                "validBefore": 1740672154,
                "nonce": "0x" + "f3" * 32,
            },
        },
    }


@pytest.fixture
def svm_payment_document():
    return {
        "x402Version": 1,
        "scheme": "exact",
        "network": "solana-devnet",
        "payload": {"transaction": "AQABAgMEBQYHCAkKCwwNDg8QERITFBUWFxgZGhscHR4f"},
    }
