from __future__ import annotations
from typing import NamedTuple, Optional, Tuple
import logging

from ..errors import AlreadyConnected, NetworkFailure, NotConnected
from .stream import LxiStream

log = logging.getLogger(__name__)

class Address(NamedTuple):
    host: str
    port: int

class LxiDevice:
    """
    Client for an instrument speaking the LXI/SCPI line protocol over raw TCP.

    Starts disconnected; connect() opens the socket. All I/O is blocking and
    there is no timeout, so a reply that never arrives blocks receive() until
    the peer closes. Not thread-safe: use one device per thread or serialize
    access externally.
    """

    def __init__(self, address: Tuple[str, int]):
        host, port = address
        self._addr = Address(host, int(port))
        self._stream: Optional[LxiStream] = None

    def __repr__(self) -> str:
        state = "connected" if self.is_connected() else "disconnected"
        return f"LxiDevice({self._addr.host}:{self._addr.port}, {state})"

    @property
    def address(self) -> Address:
        return self._addr

    def is_connected(self) -> bool:
        return self._stream is not None

    # ---------- lifecycle ----------
    def connect(self) -> None:
        if self._stream is not None:
            raise AlreadyConnected(self._addr)
        try:
            stream = LxiStream.open(self._addr)
        except OSError as e:
            raise NetworkFailure("connect", e) from e
        self._stream = stream
        log.info("Connected to %s:%s", *self._addr)

    def disconnect(self) -> None:
        stream = self._require_stream()
        self._stream = None
        stream.close()
        log.info("Disconnected from %s:%s", *self._addr)

    def reconnect(self) -> None:
        """disconnect() then connect(). Raises NotConnected without connecting if not connected."""
        self.disconnect()
        self.connect()

    # ---------- io ----------
    def send(self, text: str) -> None:
        stream = self._require_stream()
        try:
            stream.send_line(text)
        except OSError as e:
            raise NetworkFailure("send", e) from e

    def receive(self) -> str:
        stream = self._require_stream()
        try:
            return stream.receive_line()
        except OSError as e:
            raise NetworkFailure("receive", e) from e

    def request(self, text: str) -> str:
        """Send a query line and block until its single-line reply arrives."""
        stream = self._require_stream()
        try:
            return stream.request_line(text)
        except OSError as e:
            raise NetworkFailure("request", e) from e

    def _require_stream(self) -> LxiStream:
        if self._stream is None:
            raise NotConnected(self._addr)
        return self._stream

    # ---------- context manager ----------
    def __enter__(self) -> "LxiDevice":
        self.connect()
        return self

    def __exit__(self, *exc) -> None:
        if self.is_connected():
            self.disconnect()
