"""Human-readable and JSON rendering of admin responses."""

from __future__ import annotations

import enum
import json
from typing import Any

SELF_FIELDS = (
    ("Build name", "build_name"),
    ("Build version", "build_version"),
    ("Public key", "key"),
    ("IPv6 address", "address"),
    ("IPv6 subnet", "subnet"),
    ("Routing entries", "routing_entries"),
)

PEER_FIELDS = (
    ("URI", "uri"),
    ("Up", "up"),
    ("Inbound", "inbound"),
    ("Public key", "key"),
    ("IPv6 address", "address"),
    ("IPv6 subnet", "subnet"),
    ("Priority", "priority"),
    ("Bytes received", "bytes_recvd"),
    ("Bytes sent", "bytes_sent"),
    ("RX rate", "rx_rate"),
    ("TX rate", "tx_rate"),
    ("Uptime", "uptime"),
    ("Last error", "last_error"),
)

TREE_FIELDS = (
    ("Public key", "key"),
    ("IPv6 address", "address"),
    ("Parent", "parent"),
    ("Sequence", "sequence"),
)


class Command(enum.Enum):
    LIST = "list"
    GETSELF = "getself"
    GETPEERS = "getpeers"
    GETTREE = "gettree"
    OTHER = None

    @classmethod
    def from_name(cls, name: str) -> "Command":
        lowered = name.lower()
        for command in cls:
            if command.value == lowered:
                return command
        return cls.OTHER


def render_json(data: Any) -> str:
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)


def format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return "n/a"
    return json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


def render_kv(obj: Any, fields: tuple[tuple[str, str], ...]) -> list[str]:
    """Render the present ``fields`` of ``obj`` as aligned ``label: value`` lines.

    Labels are padded to the longest label in ``fields`` plus one so every
    value in the block starts in the same column. Fields missing from the
    object produce no line at all.
    """
    if not isinstance(obj, dict):
        return []

    width = max(len(label) for label, _ in fields) + 1
    lines = []
    for label, key in fields:
        if key in obj:
            lines.append(f"  {label}:{' ' * (width - len(label))}  {format_value(obj[key])}")
    return lines


def _render_blocks(entries: list[Any], fields: tuple[tuple[str, str], ...], empty_text: str) -> list[str]:
    if not entries:
        return [empty_text]

    lines: list[str] = []
    for index, entry in enumerate(entries):
        if index > 0:
            lines.append("")
        lines.extend(render_kv(entry, fields))
    return lines


def _field(payload: Any, name: str) -> Any:
    return payload.get(name) if isinstance(payload, dict) else None


def render_payload(command: str, payload: Any) -> str:
    kind = Command.from_name(command)

    if kind is Command.LIST:
        names = _field(payload, "list")
        if not isinstance(names, list):
            return ""
        lines = ["Available commands:"]
        lines.extend(f"  {name}" for name in names if isinstance(name, str))
        return "\n".join(lines)

    if kind is Command.GETSELF:
        return "\n".join(render_kv(payload, SELF_FIELDS))

    if kind is Command.GETPEERS:
        peers = _field(payload, "peers")
        if not isinstance(peers, list):
            return ""
        return "\n".join(_render_blocks(peers, PEER_FIELDS, "No peers connected."))

    if kind is Command.GETTREE:
        tree = _field(payload, "tree")
        if not isinstance(tree, list):
            return ""
        return "\n".join(_render_blocks(tree, TREE_FIELDS, "No tree entries."))

    return render_json(payload)


def render(command: str, message: Any, json_output: bool = False) -> str:
    """Render a decoded response wrapper.

    In JSON mode the whole wrapper is printed untouched. Otherwise the
    wrapper must already have passed ``interpret`` and only its payload is
    rendered.
    """
    if json_output:
        return render_json(message)
    payload = message.get("response") if isinstance(message, dict) else None
    return render_payload(command, payload)
