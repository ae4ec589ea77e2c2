"""
Configuration for a server advertising x402 payment requirements.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from eth_utils import is_hex_address, to_checksum_address

from ..log import create_logger
from .environment import build_environment
from .errors import ConfigError
from .networks import KNOWN_NETWORKS, is_evm_network
from .requirements import PaymentRequirementsInput

__all__ = [
    "NegotiationConfig",
    "load_negotiation_config",
]

_logger = create_logger("config")

DEFAULT_FACILITATOR_URL = "https://x402.org/facilitator"

_PARAMETER_TO_ENV_KEY = {
    "facilitator_url": "X402_FACILITATOR_URL",
    "pay_to": "X402_PAY_TO",
    "network": "X402_NETWORK",
    "price": "X402_PRICE",
    "resource": "X402_RESOURCE",
    "method": "X402_METHOD",
    "description": "X402_DESCRIPTION",
    "mime_type": "X402_MIME_TYPE",
    "timeout_seconds": "X402_TIMEOUT_SECONDS",
    "payer_private_key": "X402_PAYER_PRIVATE_KEY",
    "log_level": "X402_LOG_LEVEL",
    "log_json": "X402_LOG_JSON",
}


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _collect_parameter_overrides(explicit: Mapping[str, Any]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown configuration parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


def _normalize_private_key(raw_key: str) -> str:
    key = raw_key.strip()
    if not key:
        raise ConfigError("X402_PAYER_PRIVATE_KEY must not be empty")
    if not key.startswith("0x"):
        key = "0x" + key
    if len(key) != 66:
        raise ConfigError("X402_PAYER_PRIVATE_KEY must be 32 bytes (64 hex chars)")
    return key


def _normalize_pay_to(raw_address: str, network: str) -> str:
    value = raw_address.strip()
    if not value:
        raise ConfigError("X402_PAY_TO must not be empty")
    if not is_evm_network(network):
        return value
    if not is_hex_address(value):
        raise ConfigError("X402_PAY_TO is not a valid EVM address")
    return to_checksum_address(value)


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _optional_int(values: Mapping[str, str], key: str) -> Optional[int]:
    raw = values.get(key)
    if raw is None or raw.strip() == "":
        return None
    try:
        parsed = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got '{raw}'") from exc
    if parsed <= 0:
        raise ConfigError(f"{key} must be greater than zero")
    return parsed


@dataclass(frozen=True)
class NegotiationConfig:
    facilitator_url: str
    pay_to: str
    network: str
    price: str
    resource: str
    method: str = "GET"
    description: Optional[str] = None
    mime_type: Optional[str] = None
    max_timeout_seconds: Optional[int] = None
    payer_private_key: Optional[str] = None
    log_level: str = "INFO"
    log_json: bool = False

    def requirements_input(self) -> PaymentRequirementsInput:
        return PaymentRequirementsInput(
            pay_to=self.pay_to,
            network=self.network,
            price=self.price,
            resource=self.resource,
            method=self.method,
            description=self.description,
            mime_type=self.mime_type,
            max_timeout_seconds=self.max_timeout_seconds,
        )

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "NegotiationConfig":
        facilitator_url = values.get("X402_FACILITATOR_URL", DEFAULT_FACILITATOR_URL).rstrip("/")

        network = values.get("X402_NETWORK", "base-sepolia").strip()
        if network not in KNOWN_NETWORKS:
            raise ConfigError(
                f"X402_NETWORK must be one of {', '.join(KNOWN_NETWORKS)}, got '{network}'"
            )

        pay_to_raw = values.get("X402_PAY_TO")
        if pay_to_raw is None:
            raise ConfigError("X402_PAY_TO must be provided")
        pay_to = _normalize_pay_to(pay_to_raw, network)

        private_key = values.get("X402_PAYER_PRIVATE_KEY")
        if private_key is not None:
            private_key = _normalize_private_key(private_key)

        return cls(
            facilitator_url=facilitator_url,
            pay_to=pay_to,
            network=network,
            price=values.get("X402_PRICE", "$0.01"),
            resource=values.get("X402_RESOURCE", "https://example.com/protected-resource"),
            method=values.get("X402_METHOD", "GET"),
            description=values.get("X402_DESCRIPTION"),
            mime_type=values.get("X402_MIME_TYPE"),
            max_timeout_seconds=_optional_int(values, "X402_TIMEOUT_SECONDS"),
            payer_private_key=private_key,
            log_level=values.get("X402_LOG_LEVEL", "INFO"),
            log_json=_parse_bool(values.get("X402_LOG_JSON", "false")),
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        **parameters: Any,
    ) -> "NegotiationConfig":
        """
        Resolve the configuration from the environment, a ``.env`` file and
        keyword parameters (``pay_to=...``, ``network=...``), in increasing
        order of precedence.
        """
        merged_overrides = dict(overrides or {})
        merged_overrides.update(_collect_parameter_overrides(parameters))

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        _logger.debug(
            "Resolved configuration sources",
            {"operation": "load_config", "sources": dict(environment.origins)},
        )
        return cls.from_mapping(environment.variables)


def load_negotiation_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    **parameters: Any,
) -> NegotiationConfig:
    """Convenience wrapper that mirrors :meth:`NegotiationConfig.from_env`."""
    return NegotiationConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        **parameters,
    )
