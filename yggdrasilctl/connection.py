"""Network client for the daemon admin socket."""

from __future__ import annotations

import socket
from typing import Any

from .config import DEFAULT_ENDPOINT
from .log import get_logger
from .protocol import (
    AdminError,
    ResponseParseError,
    build_request,
    decode_response,
    encode_request,
    interpret,
)

logger = get_logger(__name__)

TCP_SCHEME = "tcp://"


class ConnectError(AdminError):
    """Raised when the admin socket cannot be reached."""


class TransportError(AdminError):
    """Raised when writing the request or reading the response fails."""


class AdminTimeoutError(TransportError):
    """Raised when an optional timeout expires before the response arrives."""


class EmptyResponseError(TransportError):
    """Raised when the daemon closes the connection without a response line."""


def resolve_endpoint(endpoint: str) -> tuple[str, int]:
    address = endpoint[len(TCP_SCHEME) :] if endpoint.startswith(TCP_SCHEME) else endpoint
    host, sep, port = address.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ConnectError(f"Failed to connect to admin socket at {endpoint}: invalid address {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host, int(port)


class AdminClient:
    """One-shot JSON-over-TCP client for the admin protocol.

    Every ``exchange`` opens its own connection, sends one request and reads
    one response line. Nothing is kept between calls.
    """

    def __init__(self, endpoint: str = DEFAULT_ENDPOINT, timeout: float | None = None):
        self.endpoint = endpoint
        self.timeout = timeout

    def exchange(self, request: dict[str, Any]) -> str:
        host, port = resolve_endpoint(self.endpoint)
        logger.debug("connecting", endpoint=self.endpoint, host=host, port=port)

        try:
            sock = socket.create_connection((host, port), timeout=self.timeout)
        except socket.timeout as exc:
            raise AdminTimeoutError(f"Timed out connecting to admin socket at {self.endpoint}") from exc
        except OSError as exc:
            raise ConnectError(f"Failed to connect to admin socket at {self.endpoint}: {exc}") from exc

        with sock:
            packet = encode_request(request)
            logger.debug("sending request", request=request.get("request"), size=len(packet))
            try:
                with sock.makefile("rwb") as stream:
                    stream.write(packet)
                    stream.flush()
                    raw = stream.readline()
            except socket.timeout as exc:
                raise AdminTimeoutError(f"Timed out waiting for response from {self.endpoint}") from exc
            except OSError as exc:
                raise TransportError(f"Admin socket I/O failed: {exc}") from exc

        logger.debug("received response", size=len(raw))
        if not raw.strip():
            raise EmptyResponseError("Empty response from admin socket")
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ResponseParseError(f"Response is not valid UTF-8: {exc}") from exc

    def call(self, command: str, arguments: dict[str, str] | None = None) -> Any:
        """Send a command and return the decoded response wrapper unchecked."""
        return decode_response(self.exchange(build_request(command, arguments)))

    def request(self, command: str, arguments: dict[str, str] | None = None) -> Any:
        return interpret(self.call(command, arguments))

    def list(self) -> Any:
        return self.request("list")

    def get_self(self) -> Any:
        return self.request("getSelf")

    def get_peers(self) -> Any:
        return self.request("getPeers")

    def get_tree(self) -> Any:
        return self.request("getTree")

    def add_peer(self, uri: str, interface: str | None = None) -> Any:
        arguments = {"uri": uri}
        if interface is not None:
            arguments["interface"] = interface
        return self.request("addPeer", arguments)

    def remove_peer(self, uri: str, interface: str | None = None) -> Any:
        arguments = {"uri": uri}
        if interface is not None:
            arguments["interface"] = interface
        return self.request("removePeer", arguments)
