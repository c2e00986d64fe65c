"""Tests for the webhook daemon socket client against a throwaway Unix socket server."""

import json
import socket
import threading
from pathlib import Path

import pytest

from ship.core.errors import DaemonNotRunningError, SubscriptionError
from ship.core.subscriptions.real import SocketEventSubscriptions


class _OneShotDaemon:
    """Accepts a single connection, records the request line, replies with `reply`."""

    def __init__(self, socket_path: Path, reply: bytes) -> None:
        self.received: list[dict] = []
        self._reply = reply
        self._server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._server.bind(str(socket_path))
        self._server.listen(1)
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        conn, _ = self._server.accept()
        with conn:
            data = b""
            while b"\n" not in data:
                chunk = conn.recv(4096)
                if not chunk:
                    break
                data += chunk
            self.received.append(json.loads(data.decode("utf-8")))
            conn.sendall(self._reply)

    def close(self) -> None:
        self._thread.join(timeout=5)
        self._server.close()


@pytest.fixture
def socket_path(tmp_path: Path) -> Path:
    return tmp_path / "d.sock"


def test_subscribe_sends_one_json_line(socket_path: Path) -> None:
    daemon = _OneShotDaemon(socket_path, b'{"type": "success"}\n')
    try:
        SocketEventSubscriptions(socket_path).subscribe("session-1", [7, 12])
    finally:
        daemon.close()

    assert daemon.received == [
        {"type": "subscribe", "sessionId": "session-1", "prNumbers": [7, 12]}
    ]


def test_unsubscribe(socket_path: Path) -> None:
    daemon = _OneShotDaemon(socket_path, b'{"type": "success", "message": "ok"}\n')
    try:
        SocketEventSubscriptions(socket_path).unsubscribe("session-1", [7])
    finally:
        daemon.close()

    assert daemon.received[0]["type"] == "unsubscribe"


def test_error_response_raises(socket_path: Path) -> None:
    daemon = _OneShotDaemon(socket_path, b'{"type": "error", "error": "unknown session"}\n')
    try:
        with pytest.raises(SubscriptionError, match="unknown session"):
            SocketEventSubscriptions(socket_path).subscribe("session-1", [7])
    finally:
        daemon.close()


def test_malformed_response_raises(socket_path: Path) -> None:
    daemon = _OneShotDaemon(socket_path, b"not json\n")
    try:
        with pytest.raises(SubscriptionError, match="Invalid response"):
            SocketEventSubscriptions(socket_path).subscribe("session-1", [7])
    finally:
        daemon.close()


def test_missing_socket_means_daemon_not_running(socket_path: Path) -> None:
    client = SocketEventSubscriptions(socket_path)

    assert client.is_running() is False
    with pytest.raises(DaemonNotRunningError):
        client.subscribe("session-1", [7])


def test_stale_socket_file_means_daemon_not_running(socket_path: Path) -> None:
    # Bound but never listening: connect() is refused
    stale = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    stale.bind(str(socket_path))
    stale.close()

    with pytest.raises(DaemonNotRunningError):
        SocketEventSubscriptions(socket_path).subscribe("session-1", [7])
