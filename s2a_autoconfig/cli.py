"""
S2A CLI - Query the mTLS Auto-Configuration

Usage:
    # Print the S2A address (exit code 1 when unavailable)
    s2a-autoconfig address

    # Print the endpoint that would be queried
    s2a-autoconfig endpoint

    # JSON output, settings from a YAML file
    s2a-autoconfig --json --config /etc/s2a/config.yaml address
"""

import argparse
import json
import sys

from .common.config import load_settings
from .common.exceptions import ConfigError
from .common.logging_setup import setup_logging
from .mtls.service import S2A


def cmd_address(s2a: S2A, as_json: bool) -> int:
    address = s2a.get_s2a_address()
    if as_json:
        print(json.dumps({
            "success": bool(address),
            **s2a.config.to_dict(),
            "endpoint": s2a.sync.endpoint,
        }))
    elif address:
        print(address)
    else:
        print("S2A address unavailable", file=sys.stderr)
    return 0 if address else 1


def cmd_endpoint(s2a: S2A, as_json: bool) -> int:
    endpoint = s2a.sync.endpoint
    if as_json:
        print(json.dumps({"endpoint": endpoint}))
    else:
        print(endpoint)
    return 0


COMMANDS = {
    "address": cmd_address,
    "endpoint": cmd_endpoint,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s2a-autoconfig",
        description="Look up the S2A address from the mTLS auto-configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", help="YAML settings file")
    parser.add_argument("--json", action="store_true", help="Print JSON output")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("address", help="Fetch and print the S2A address")
    subparsers.add_parser("endpoint", help="Print the auto-config endpoint URL")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return 2

    setup_logging(settings.log_level, settings.log_format == "json")

    with S2A(settings=settings) as s2a:
        return COMMANDS[args.command](s2a, args.json)


if __name__ == "__main__":
    sys.exit(main())
