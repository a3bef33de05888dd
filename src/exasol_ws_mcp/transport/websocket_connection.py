"""Websocket connection to an Exasol server.

One text frame out, one text frame in per exchange. The connection is
not thread-safe; callers serialize access.
"""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass

import websocket

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass
class EndpointInfo:
    """Where the connection points to."""

    url: str = ""
    encrypted: bool = False


class WebSocketConnection:
    """Manages the websocket to the database.

    Usage::

        conn = WebSocketConnection("wss://db.example.com:8563")
        conn.open()
        conn.write(frame_text)
        reply = conn.read()
        conn.close()
    """

    def __init__(
        self,
        url: str,
        timeout: float | None = DEFAULT_TIMEOUT,
        verify_certificate: bool = True,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._verify_certificate = verify_certificate
        self._ws: websocket.WebSocket | None = None
        self._endpoint_info = EndpointInfo(url=url, encrypted=url.startswith("wss://"))

    @classmethod
    def from_config(cls, config) -> WebSocketConnection:
        return cls(
            config.url,
            timeout=config.timeout,
            verify_certificate=config.verify_certificate,
        )

    @property
    def connected(self) -> bool:
        return self._ws is not None and self._ws.connected

    @property
    def endpoint_info(self) -> EndpointInfo:
        return self._endpoint_info

    def open(self) -> EndpointInfo:
        """Open the websocket.

        Raises:
            ConnectionError: If the server cannot be reached.
        """
        sslopt = None
        if self._endpoint_info.encrypted and not self._verify_certificate:
            sslopt = {"cert_reqs": ssl.CERT_NONE, "check_hostname": False}

        try:
            self._ws = websocket.create_connection(
                self._url,
                timeout=self._timeout,
                sslopt=sslopt,
                enable_multithread=False,
            )
        except (websocket.WebSocketException, OSError) as e:
            raise ConnectionError(f"Could not connect to {self._url}: {e}") from e

        logger.info("Connected to %s", self._url)
        return self._endpoint_info

    def close(self) -> None:
        """Close the websocket. Safe to call more than once."""
        if self._ws is None:
            return

        try:
            self._ws.close()
        except (websocket.WebSocketException, OSError) as e:
            logger.warning("Error closing websocket: %s", e)
        finally:
            self._ws = None
            logger.info("Disconnected from %s", self._url)

    def write(self, data: str) -> None:
        """Send one text frame.

        Raises:
            ConnectionError: If not connected or the send fails.
        """
        if self._ws is None:
            raise ConnectionError("Not connected")

        try:
            self._ws.send(data)
        except (websocket.WebSocketException, OSError) as e:
            raise ConnectionError(f"Send failed: {e}") from e

    def read(self) -> str:
        """Receive one frame, blocking until it arrives or the timeout hits.

        Raises:
            ConnectionError: If not connected, the peer closed the socket,
                or the receive fails.
        """
        if self._ws is None:
            raise ConnectionError("Not connected")

        try:
            data = self._ws.recv()
        except (websocket.WebSocketException, OSError) as e:
            raise ConnectionError(f"Receive failed: {e}") from e

        if isinstance(data, bytes):
            data = data.decode("utf-8", errors="replace")
        if not data:
            raise ConnectionError("Connection closed by server")
        return data

    def send_and_receive(self, data: str) -> str:
        """Write one frame and read the reply."""
        self.write(data)
        return self.read()
