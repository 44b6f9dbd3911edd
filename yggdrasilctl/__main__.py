#!/usr/bin/env python3
"""Send one command to the daemon admin socket and print the result."""

from __future__ import annotations

import argparse
import sys

from . import __version__
from .config import DEFAULT_ENDPOINT, KNOWN_COMMANDS, ClientConfig
from .connection import AdminClient
from .log import get_logger, setup_logging
from .protocol import AdminError, interpret, parse_arguments
from .render import render

USAGE = "yggdrasilctl [options] <command> [key=value ...]"
COMMANDS_TEXT = "Commands: " + ", ".join(KNOWN_COMMANDS)

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="yggdrasilctl", usage=USAGE, epilog=COMMANDS_TEXT)
    parser.add_argument(
        "-e",
        "--endpoint",
        default=DEFAULT_ENDPOINT,
        metavar="URI",
        help=f"Admin socket address (default: {DEFAULT_ENDPOINT})",
    )
    parser.add_argument("-j", "--json", action="store_true", help="Output as raw JSON")
    parser.add_argument("-v", "--version", action="version", version=f"yggdrasilctl {__version__}")
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Give up if the daemon does not answer in time (default: wait forever)",
    )
    parser.add_argument("--debug", action="store_true", help="Log protocol diagnostics to stderr")
    parser.add_argument("command", nargs="?")
    parser.add_argument("arguments", nargs="*", metavar="key=value")
    return parser


def run(config: ClientConfig, command: str, arguments: dict[str, str]) -> str:
    client = AdminClient(endpoint=config.endpoint, timeout=config.timeout)
    message = client.call(command, arguments)
    if not config.json_output:
        interpret(message)
    return render(command, message, config.json_output)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        print(f"usage: {USAGE}", file=sys.stderr)
        print(COMMANDS_TEXT, file=sys.stderr)
        return 1

    config = ClientConfig(
        endpoint=args.endpoint,
        json_output=args.json,
        timeout=args.timeout,
        debug=args.debug,
    )
    setup_logging(debug=config.debug)

    try:
        output = run(config, args.command, parse_arguments(args.arguments))
    except AdminError as exc:
        logger.debug("command failed", command=args.command, error_type=type(exc).__name__)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    if output:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
