"""
End-to-end walk through one x402 negotiation: the server advertises its
requirements, the client signs and encodes a payment, the server decodes it
and asks the facilitator to verify it.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Iterable, Tuple

from x402_exact import (
    PAYMENT_HEADER,
    X402Error,
    advertise_requirements,
    configure_logging,
    create_facilitator_client,
    create_payment_header,
    decode_payment,
    load_negotiation_config,
)


def _override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _build_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    return {key: value for key, value in pairs}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Negotiate an x402 payment against a facilitator")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing X402_* settings",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument(
        "--skip-verify",
        action="store_true",
        help="Stop after decoding the payment header (no facilitator call)",
    )
    return parser.parse_args()


async def negotiate(args: argparse.Namespace) -> int:
    config = load_negotiation_config(env_file=args.env_file, overrides=_build_overrides(args.set or ()))
    client = create_facilitator_client(config=config)

    response = await advertise_requirements(config, client=client)
    requirements = response.accepts[0]
    logging.info(
        "Server requires %s atomic units of %s on %s",
        requirements.max_amount_required,
        requirements.asset,
        requirements.network,
    )

    header = create_payment_header(requirements, config=config)
    logging.info("Client sends %s: %s", PAYMENT_HEADER, header)

    payment = decode_payment(header)
    logging.info("Server decoded payment from %s", payment.payload.authorization.from_)

    if args.skip_verify:
        return 0

    verify_response = client.verify(payment, requirements)
    if not verify_response.get("isValid"):
        logging.error("Payment rejected: %s", verify_response)
        return 1

    logging.info("Facilitator accepted payment payload for payer %s", verify_response.get("payer"))
    return 0


def main() -> int:
    args = parse_args()
    configure_logging(args.log_level)
    try:
        return asyncio.run(negotiate(args))
    except X402Error as exc:
        logging.error("Negotiation failed: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
