"""Admin socket protocol: request encoding and response interpretation.

Requests and responses are single JSON objects terminated by a newline. This
module has no networking so the contract can be exercised on plain bytes.
"""

from __future__ import annotations

import json
from typing import Any, Iterable


class AdminError(RuntimeError):
    """Base class for every failure surfaced to the invoker."""


class ResponseParseError(AdminError):
    """Raised when the response line is not valid JSON."""


class CommandError(AdminError):
    """Raised when the daemon answers with a non-success status."""


def parse_arguments(tokens: Iterable[str]) -> dict[str, str]:
    arguments: dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if not sep:
            continue
        arguments[key] = value
    return arguments


def build_request(command: str, arguments: dict[str, str] | None = None) -> dict[str, Any]:
    return {
        "request": command,
        "arguments": dict(arguments or {}),
        "keepalive": False,
    }


def encode_request(request: dict[str, Any]) -> bytes:
    return (json.dumps(request, separators=(",", ":"), ensure_ascii=False) + "\n").encode("utf-8")


def decode_response(raw_line: bytes | str) -> Any:
    try:
        if isinstance(raw_line, bytes):
            raw_line = raw_line.decode("utf-8")
        return json.loads(raw_line.strip())
    except UnicodeDecodeError as exc:
        raise ResponseParseError(f"Response is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ResponseParseError(f"Invalid response JSON: {exc}") from exc


def interpret(message: Any) -> Any:
    """Return the payload of a decoded response or raise ``CommandError``.

    Anything other than the literal status ``"success"`` is a failure. The
    payload is not required to be present; a missing ``response`` yields None.
    """
    if not isinstance(message, dict):
        raise CommandError("unknown error")

    if message.get("status") != "success":
        error = message.get("error")
        raise CommandError(error if isinstance(error, str) else "unknown error")

    return message.get("response")
