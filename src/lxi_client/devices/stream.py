from __future__ import annotations
from typing import BinaryIO, Tuple
import logging
import socket

log = logging.getLogger(__name__)

TERMINATOR = b"\r\n"
ENCODING = "utf-8"

def strip_terminator(text: str) -> str:
    """Drop a trailing CR-LF or bare LF. A lone CR is kept."""
    if text.endswith("\r\n"):
        return text[:-2]
    elif text.endswith("\n"):
        return text[:-1]
    else:
        return text

class LxiStream:
    """
    One live TCP connection split into a buffered reader and a buffered writer.
    Both halves wrap the same socket but buffer independently.
    """

    def __init__(self, sock: socket.socket):
        self._sock = sock
        self._inp: BinaryIO = sock.makefile("rb")
        self._out: BinaryIO = sock.makefile("wb")

    @classmethod
    def open(cls, address: Tuple[str, int]) -> "LxiStream":
        """Connect to (host, port). Raises OSError; no socket is left open on failure."""
        sock = socket.create_connection(address)
        try:
            return cls(sock)
        except Exception:
            sock.close()
            raise

    # ---------- framing ----------
    def send_line(self, text: str) -> None:
        log.debug("-> %r", text)
        # unencodable characters (lone surrogates) go out as "?"
        self._out.write(text.encode(ENCODING, errors="replace"))
        self._out.write(TERMINATOR)
        self._out.flush()

    def receive_line(self) -> str:
        # readline stops after b"\n" or at EOF
        raw = self._inp.readline()
        text = strip_terminator(raw.decode(ENCODING, errors="replace"))
        log.debug("<- %r", text)
        return text

    def request_line(self, text: str) -> str:
        self.send_line(text)
        return self.receive_line()

    # ---------- teardown ----------
    def close(self) -> None:
        """Release both halves and the socket."""
        try:
            self._inp.close()
            try:
                self._out.close()
            except OSError as e:
                # close() flushes; a dead peer makes that fail
                log.debug("Dropping unsent output: %s", e)
        finally:
            self._sock.close()
