"""
Conversion of a human-facing price into an atomic token amount.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Callable, Mapping, Optional, Union

from .networks import AssetInfo, default_asset

__all__ = [
    "AtomicAmount",
    "Money",
    "Price",
    "PriceResolutionFailure",
    "PriceResolver",
    "TokenAmount",
    "process_price_to_atomic_amount",
]

_MIN_MONEY = Decimal("0.0001")
_MAX_MONEY = Decimal("999999999")
_NOT_NUMERIC = re.compile(r"[^0-9.\-]+")
_ATOMIC = re.compile(r"[0-9]+")

Money = Union[str, int, float, Decimal]


@dataclass(frozen=True)
class TokenAmount:
    """An explicit atomic amount of a specific token."""

    amount: str
    asset: AssetInfo


Price = Union[Money, TokenAmount, Mapping[str, Any]]


@dataclass(frozen=True)
class AtomicAmount:
    max_amount_required: str
    asset: AssetInfo


@dataclass(frozen=True)
class PriceResolutionFailure:
    error: str


PriceResolver = Callable[[Price, str], Union[AtomicAmount, PriceResolutionFailure]]


def _parse_money(price: Money) -> Optional[Decimal]:
    if isinstance(price, bool):
        return None
    if isinstance(price, str):
        cleaned = _NOT_NUMERIC.sub("", price)
    else:
        cleaned = str(price)
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount < _MIN_MONEY or amount > _MAX_MONEY:
        return None
    return amount


def _to_atomic(amount: Decimal, decimals: int) -> str:
    scaled = (amount * (Decimal(10) ** decimals)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return str(int(scaled))


def _token_amount(price: Union[TokenAmount, Mapping[str, Any]]) -> Union[AtomicAmount, PriceResolutionFailure]:
    if isinstance(price, TokenAmount):
        amount, asset = price.amount, price.asset
    else:
        try:
            amount = str(price["amount"])
            raw_asset = price["asset"]
            asset = raw_asset if isinstance(raw_asset, AssetInfo) else AssetInfo.from_mapping(raw_asset)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            return PriceResolutionFailure(error=f"Invalid token amount: {exc}")

    if not _ATOMIC.fullmatch(amount):
        return PriceResolutionFailure(error=f"Invalid token amount: {amount!r}")
    return AtomicAmount(max_amount_required=amount, asset=asset)


def process_price_to_atomic_amount(
    price: Price, network: str
) -> Union[AtomicAmount, PriceResolutionFailure]:
    """
    Resolve ``price`` on ``network``.

    Money is priced in the network's default USDC deployment. Token amounts
    are passed through. Problems are returned as a
    :class:`PriceResolutionFailure`, never raised.
    """
    if isinstance(price, (TokenAmount, Mapping)):
        return _token_amount(price)

    amount = _parse_money(price)
    if amount is None:
        return PriceResolutionFailure(error=f"Invalid price: {price!r}")

    asset = default_asset(network)
    if asset is None:
        return PriceResolutionFailure(error=f"Unable to find default asset on network: {network}")

    return AtomicAmount(max_amount_required=_to_atomic(amount, asset.decimals), asset=asset)
