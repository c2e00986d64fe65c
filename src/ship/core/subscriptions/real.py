"""Webhook daemon client over its Unix domain socket.

Protocol: one JSON object per line in each direction. Commands are
`{"type": "subscribe" | "unsubscribe", "sessionId": str, "prNumbers": [int]}`;
responses are `{"type": "success"}` or `{"type": "error", "error": str}`.
"""

import json
import logging
import socket
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ship.core.errors import DaemonNotRunningError, SubscriptionError
from ship.core.subscriptions.abc import EventSubscriptions

logger = logging.getLogger(__name__)

DAEMON_SOCKET_PATH = Path("/tmp/ship-webhook.sock")
IPC_TIMEOUT_SECONDS = 5.0


class SubscriptionCommand(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["subscribe", "unsubscribe"]
    session_id: str = Field(alias="sessionId")
    pr_numbers: list[int] = Field(alias="prNumbers")


class SuccessResponse(BaseModel):
    type: Literal["success"]
    message: str | None = None


class ErrorResponse(BaseModel):
    type: Literal["error"]
    error: str


IpcResponse = Annotated[SuccessResponse | ErrorResponse, Field(discriminator="type")]
_response_adapter: TypeAdapter[SuccessResponse | ErrorResponse] = TypeAdapter(IpcResponse)


class SocketEventSubscriptions(EventSubscriptions):
    """Production client talking to the daemon's socket."""

    def __init__(
        self,
        socket_path: Path = DAEMON_SOCKET_PATH,
        timeout: float = IPC_TIMEOUT_SECONDS,
    ) -> None:
        self._socket_path = socket_path
        self._timeout = timeout

    def is_running(self) -> bool:
        return self._socket_path.exists()

    def subscribe(self, session_id: str, pr_numbers: list[int]) -> None:
        self._send(
            SubscriptionCommand(type="subscribe", session_id=session_id, pr_numbers=pr_numbers)
        )

    def unsubscribe(self, session_id: str, pr_numbers: list[int]) -> None:
        self._send(
            SubscriptionCommand(type="unsubscribe", session_id=session_id, pr_numbers=pr_numbers)
        )

    def _send(self, command: SubscriptionCommand) -> None:
        if not self.is_running():
            raise DaemonNotRunningError()

        payload = command.model_dump_json(by_alias=True) + "\n"
        logger.debug("Sending to %s: %s", self._socket_path, payload.strip())
        try:
            with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
                sock.settimeout(self._timeout)
                sock.connect(str(self._socket_path))
                sock.sendall(payload.encode("utf-8"))
                raw = self._read_line(sock)
        except (FileNotFoundError, ConnectionRefusedError) as e:
            raise DaemonNotRunningError() from e
        except OSError as e:
            raise SubscriptionError(f"IPC error: {e}") from e

        logger.debug("Received: %s", raw)
        try:
            response = _response_adapter.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            raise SubscriptionError(f"Invalid response from daemon: {e}") from e

        if isinstance(response, ErrorResponse):
            raise SubscriptionError(response.error)

    def _read_line(self, sock: socket.socket) -> str:
        chunks: list[bytes] = []
        while True:
            chunk = sock.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
            if b"\n" in chunk:
                break
        return b"".join(chunks).decode("utf-8").split("\n", 1)[0]
