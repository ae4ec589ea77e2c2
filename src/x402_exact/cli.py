"""
Command-line interface for building, signing and inspecting x402 payments.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Iterable, Sequence, Tuple

from pydantic import ValidationError as SchemaError

from .api import advertise_requirements, create_payment_header
from .core.codec import decode_payment, payment_to_wire
from .core.config import load_negotiation_config
from .core.environment import build_environment
from .core.errors import X402Error
from .core.types import PaymentRequirements
from .log import configure_logging, create_logger

_logger = create_logger("cli")


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="x402-exact",
        description="Build, sign and decode x402 exact-scheme payments",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing X402_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Python logging level (default: X402_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit one JSON object per log line",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser(
        "requirements",
        help="Print the HTTP 402 body for the configured resource",
    )
    decode = commands.add_parser("decode", help="Decode and validate an X-PAYMENT header value")
    decode.add_argument("header", help="The base64 header value")
    sign = commands.add_parser("sign", help="Sign payment requirements and print the X-PAYMENT header")
    sign.add_argument(
        "requirements",
        help="Path to a JSON file holding one PaymentRequirements object ('-' for stdin)",
    )
    sign.add_argument(
        "--private-key",
        default=None,
        help="Payer private key (default: X402_PAYER_PRIVATE_KEY)",
    )
    return parser


def _run_requirements(args: argparse.Namespace, overrides: dict[str, str]) -> int:
    config = load_negotiation_config(env_file=args.env_file, overrides=overrides)
    response = asyncio.run(advertise_requirements(config))
    print(json.dumps(response.to_wire(), indent=2))
    return 0


def _run_decode(args: argparse.Namespace) -> int:
    payment = decode_payment(args.header)
    _logger.info("Decoded payment payload", {"operation": "decode", "network": payment.network})
    print(json.dumps(payment_to_wire(payment), indent=2, ensure_ascii=False))
    return 0


def _read_requirements(path: str) -> PaymentRequirements:
    if path == "-":
        raw = sys.stdin.read()
    else:
        with open(path, encoding="utf-8") as handle:
            raw = handle.read()
    return PaymentRequirements.model_validate_json(raw)


def _run_sign(args: argparse.Namespace, overrides: dict[str, str]) -> int:
    environment = build_environment(env_file=args.env_file, overrides=overrides)
    private_key = args.private_key or environment.get("X402_PAYER_PRIVATE_KEY")
    requirements = _read_requirements(args.requirements)
    print(create_payment_header(requirements, private_key=private_key))
    return 0


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    overrides = _collect_overrides(args.set or ())

    try:
        environment = build_environment(env_file=args.env_file, overrides=overrides)
    except X402Error as exc:
        _logger.error("Invalid configuration", exc)
        return 1

    level = args.log_level or environment.get("X402_LOG_LEVEL", "INFO")
    json_logs = args.json_logs or environment.get("X402_LOG_JSON", "").lower() in ("1", "true", "yes")
    configure_logging(level, output_json=json_logs or None)

    try:
        if args.command == "requirements":
            return _run_requirements(args, overrides)
        if args.command == "decode":
            return _run_decode(args)
        return _run_sign(args, overrides)
    except X402Error as exc:
        _logger.error(f"{args.command} failed", exc, {"operation": args.command})
        return 1
    except (OSError, SchemaError) as exc:
        _logger.error("Invalid input", exc, {"operation": args.command})
        return 1


def main() -> None:
    raise SystemExit(run_cli())
