import subprocess
import sys
import unittest
from pathlib import Path

from tests.fake_daemon import HANG, RESET, FakeAdminDaemon, unused_endpoint
from yggdrasilctl import AdminClient
from yggdrasilctl.connection import (
    AdminTimeoutError,
    ConnectError,
    EmptyResponseError,
    TransportError,
    resolve_endpoint,
)
from yggdrasilctl.log import setup_logging
from yggdrasilctl.protocol import CommandError, ResponseParseError

PROJECT_ROOT = Path(__file__).resolve().parent.parent

UNCONFIGURED_CLIENT = """
from tests.fake_daemon import FakeAdminDaemon
from yggdrasilctl import AdminClient

replies = {"getSelf": {"status": "success", "response": {"key": "abcd"}}}
with FakeAdminDaemon(replies) as daemon:
    AdminClient(daemon.endpoint).get_self()
"""


class ResolveEndpointTests(unittest.TestCase):
    def test_strips_tcp_scheme(self):
        self.assertEqual(resolve_endpoint("tcp://localhost:9001"), ("localhost", 9001))

    def test_bare_host_port(self):
        self.assertEqual(resolve_endpoint("10.0.0.1:1234"), ("10.0.0.1", 1234))

    def test_bracketed_ipv6(self):
        self.assertEqual(resolve_endpoint("tcp://[::1]:9001"), ("::1", 9001))

    def test_invalid_address_names_endpoint(self):
        with self.assertRaises(ConnectError) as ctx:
            resolve_endpoint("unix:///var/run/yggdrasil.sock")
        self.assertIn("unix:///var/run/yggdrasil.sock", str(ctx.exception))


class AdminClientTests(unittest.TestCase):
    def setUp(self):
        setup_logging()

    def test_request_round_trip(self):
        replies = {"getSelf": {"status": "success", "response": {"key": "abcd"}}}
        with FakeAdminDaemon(replies) as daemon:
            client = AdminClient(daemon.endpoint)
            self.assertEqual(client.request("getSelf"), {"key": "abcd"})

        self.assertEqual(daemon.requests()[0], {"request": "getSelf", "arguments": {}, "keepalive": False})

    def test_each_call_uses_a_new_connection(self):
        replies = {"list": {"status": "success", "response": {"list": ["list"]}}}
        with FakeAdminDaemon(replies) as daemon:
            client = AdminClient(daemon.endpoint)
            client.list()
            client.list()
        self.assertEqual(len(daemon.received), 2)

    def test_arguments_are_sent(self):
        replies = {"addPeer": {"status": "success", "response": {}}}
        with FakeAdminDaemon(replies) as daemon:
            AdminClient(daemon.endpoint).add_peer("tls://a:1", interface="eth0")
        self.assertEqual(daemon.requests()[0]["arguments"], {"uri": "tls://a:1", "interface": "eth0"})

    def test_error_status(self):
        with FakeAdminDaemon() as daemon:
            with self.assertRaises(CommandError) as ctx:
                AdminClient(daemon.endpoint).request("badcommand")
        self.assertEqual(str(ctx.exception), "unknown command badcommand")

    def test_call_returns_unchecked_wrapper(self):
        with FakeAdminDaemon() as daemon:
            message = AdminClient(daemon.endpoint).call("badcommand")
        self.assertEqual(message["status"], "error")

    def test_empty_response(self):
        with FakeAdminDaemon({"getPeers": b""}) as daemon:
            with self.assertRaises(EmptyResponseError):
                AdminClient(daemon.endpoint).get_peers()

    def test_blank_line_is_empty_response(self):
        with FakeAdminDaemon({"getPeers": b"   \n"}) as daemon:
            with self.assertRaises(EmptyResponseError):
                AdminClient(daemon.endpoint).get_peers()

    def test_malformed_response(self):
        with FakeAdminDaemon({"getTree": b"{nope\n"}) as daemon:
            with self.assertRaises(ResponseParseError):
                AdminClient(daemon.endpoint).get_tree()

    def test_invalid_utf8_response(self):
        reply = b'{"status":"success","response":{"key":"ab\xff\xfe"}}\n'
        with FakeAdminDaemon({"getSelf": reply}) as daemon:
            with self.assertRaises(ResponseParseError):
                AdminClient(daemon.endpoint).get_self()

    def test_reset_after_connect_is_transport_error(self):
        with FakeAdminDaemon({"getPeers": RESET}) as daemon:
            with self.assertRaises(TransportError) as ctx:
                AdminClient(daemon.endpoint).get_peers()
        self.assertNotIsInstance(ctx.exception, EmptyResponseError)
        self.assertIsInstance(ctx.exception.__cause__, OSError)

    def test_partial_last_line_is_parsed(self):
        reply = b'{"status":"success","response":{"key":"ab"}}'
        with FakeAdminDaemon({"getSelf": reply}) as daemon:
            self.assertEqual(AdminClient(daemon.endpoint).get_self(), {"key": "ab"})

    def test_connection_refused_names_endpoint(self):
        endpoint = unused_endpoint()
        with self.assertRaises(ConnectError) as ctx:
            AdminClient(endpoint).get_self()
        self.assertIn(endpoint, str(ctx.exception))

    def test_timeout(self):
        with FakeAdminDaemon({"getSelf": HANG}) as daemon:
            with self.assertRaises(AdminTimeoutError):
                AdminClient(daemon.endpoint, timeout=0.2).get_self()


class LibraryUseTests(unittest.TestCase):
    def test_client_without_logging_setup_keeps_stdout_clean(self):
        result = subprocess.run(
            [sys.executable, "-c", UNCONFIGURED_CLIENT],
            cwd=PROJECT_ROOT,
            capture_output=True,
            text=True,
            timeout=30,
        )
        self.assertEqual(result.returncode, 0, result.stderr)
        self.assertEqual(result.stdout, "")
        self.assertEqual(result.stderr, "")


if __name__ == "__main__":
    unittest.main()
