from dataclasses import dataclass

DEFAULT_ENDPOINT = "tcp://localhost:9001"

KNOWN_COMMANDS = ("list", "getSelf", "getPeers", "getTree", "addPeer", "removePeer")


@dataclass(frozen=True)
class ClientConfig:
    endpoint: str = DEFAULT_ENDPOINT
    json_output: bool = False
    timeout: float | None = None
    debug: bool = False
