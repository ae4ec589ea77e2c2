"""
Known networks, their family (EVM or SVM) and their default USDC deployments.

Family membership is always a lookup in the closed sets below; it is never
inferred from the shape of the network name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .errors import UnsupportedNetworkError

__all__ = [
    "AssetInfo",
    "EVM_NETWORKS",
    "KNOWN_NETWORKS",
    "NetworkFamily",
    "SVM_NETWORKS",
    "chain_id",
    "default_asset",
    "is_evm_network",
    "is_svm_network",
    "network_family",
]


class NetworkFamily(str, Enum):
    EVM = "evm"
    SVM = "svm"


EVM_NETWORKS = (
    "base",
    "base-sepolia",
    "avalanche",
    "avalanche-fuji",
    "polygon",
    "polygon-amoy",
    "sei",
    "sei-testnet",
    "iotex",
)

SVM_NETWORKS = (
    "solana",
    "solana-devnet",
)

KNOWN_NETWORKS = EVM_NETWORKS + SVM_NETWORKS

_CHAIN_IDS = {
    "base": 8453,
    "base-sepolia": 84532,
    "avalanche": 43114,
    "avalanche-fuji": 43113,
    "polygon": 137,
    "polygon-amoy": 80002,
    "sei": 1329,
    "sei-testnet": 1328,
    "iotex": 4689,
}


@dataclass(frozen=True)
class AssetInfo:
    """
    A token the payer is asked to transfer.

    ``eip712`` holds the token's EIP-712 domain name and version and is only
    present for EVM assets.
    """

    address: str
    decimals: int
    eip712: Optional[Mapping[str, Any]] = field(default=None)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "AssetInfo":
        eip712 = values.get("eip712")
        return cls(
            address=str(values["address"]),
            decimals=int(values.get("decimals", 6)),
            eip712=dict(eip712) if eip712 is not None else None,
        )


def _usdc(address: str, name: str = "USD Coin", version: str = "2") -> AssetInfo:
    # Stored lowercase; the EVM builder checksums on the way out.
    return AssetInfo(address=address, decimals=6, eip712={"name": name, "version": version})


_DEFAULT_ASSETS: Dict[str, AssetInfo] = {
    "base": _usdc("0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"),
    "base-sepolia": _usdc("0x036cbd53842c5426634e7929541ec2318f3dcf7e", name="USDC"),
    "avalanche": _usdc("0xb97ef9ef8734c71904d8002f8b6bc66dd9c48a6e"),
    "avalanche-fuji": _usdc("0x5425890298aed601595a70ab815c96711a31bc65"),
    "polygon": _usdc("0x3c499c542cef5e3811e1192ce70d8cc03d5c3359"),
    "polygon-amoy": _usdc("0x41e94eb019c0762f9bfcf9fb1e58725bfb0e7582", name="USDC"),
    "sei": _usdc("0xe15fc38f6d8c56af07bbcbe3baf5708a2bf42392", name="USDC"),
    "sei-testnet": _usdc("0x4fcf1784b31630811181f670aea7a7bef803eaed", name="USDC"),
    "iotex": _usdc("0xcdf79194c6c285077a58da47641d4dbe51f63542", name="Bridged USDC"),
    "solana": AssetInfo(address="EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", decimals=6),
    "solana-devnet": AssetInfo(address="4zMMC9srt5Ri5X14GAgXhaHii3GnPAEERYPJgZJDncDU", decimals=6),
}


def is_evm_network(network: object) -> bool:
    return isinstance(network, str) and network in EVM_NETWORKS


def is_svm_network(network: object) -> bool:
    return isinstance(network, str) and network in SVM_NETWORKS


def network_family(network: object) -> NetworkFamily:
    """Return the family of ``network`` or raise :class:`UnsupportedNetworkError`."""
    if is_evm_network(network):
        return NetworkFamily.EVM
    if is_svm_network(network):
        return NetworkFamily.SVM
    raise UnsupportedNetworkError(network)


def chain_id(network: str) -> int:
    try:
        return _CHAIN_IDS[network]
    except KeyError as exc:
        raise UnsupportedNetworkError(network) from exc


def default_asset(network: str) -> Optional[AssetInfo]:
    return _DEFAULT_ASSETS.get(network)
