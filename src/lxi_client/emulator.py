from __future__ import annotations
from typing import Optional, Tuple
import logging
import socket
import threading

from .devices.stream import ENCODING, TERMINATOR, strip_terminator

log = logging.getLogger(__name__)

class Emulator:
    """
    Minimal LXI line server for exercising clients without hardware.

    Replies to ``*IDN?`` with ``idn``, echoes any other query (a line ending
    in ``?``) and silently accepts commands. Binds on construction, so port 0
    picks an ephemeral port readable from ``address``.
    """

    def __init__(self, address: Tuple[str, int] = ("localhost", 0), idn: str = "Emulator"):
        self.idn = idn
        self._listener = socket.create_server(address)
        self._thread: Optional[threading.Thread] = None
        self._error: Optional[BaseException] = None
        self._closing = False

    @property
    def address(self) -> Tuple[str, int]:
        host, port = self._listener.getsockname()[:2]
        return host, port

    def reply_for(self, line: str) -> Optional[str]:
        """Response line for one received line, or None for commands."""
        query = line.rstrip()
        if query.upper() == "*IDN?":
            return self.idn
        if query.endswith("?"):
            return query
        return None

    # ---------- serving ----------
    def serve(self, connections: Optional[int] = 1) -> None:
        """Accept clients one at a time; ``connections=None`` serves until close()."""
        served = 0
        while connections is None or served < connections:
            try:
                conn, peer = self._listener.accept()
            except OSError:
                if self._closing:
                    return
                raise
            log.info("Client connected %s:%s", *peer[:2])
            try:
                with conn:
                    self._session(conn)
            except OSError as e:
                # a reset or broken pipe ends only this session
                log.warning("Client %s:%s dropped: %s", *peer[:2], e)
            else:
                log.info("Client disconnected %s:%s", *peer[:2])
            served += 1

    def _session(self, conn: socket.socket) -> None:
        with conn.makefile("rb") as inp, conn.makefile("wb") as out:
            for raw in inp:
                line = strip_terminator(raw.decode(ENCODING, errors="replace"))
                log.debug("Received: %r", line)
                resp = self.reply_for(line)
                if resp is not None:
                    out.write(resp.encode(ENCODING) + TERMINATOR)
                    out.flush()

    def start(self, connections: Optional[int] = 1) -> "Emulator":
        """Serve on a background thread; pair with join()."""
        def target():
            try:
                self.serve(connections)
            except BaseException as e:
                self._error = e
        self._thread = threading.Thread(target=target, name="lxi-emulator", daemon=True)
        self._thread.start()
        return self

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the serving thread and re-raise anything it raised."""
        if self._thread is None:
            raise RuntimeError("Emulator was not started")
        self._thread.join(timeout)
        if self._thread.is_alive():
            raise TimeoutError(f"Emulator still serving after {timeout}s")
        if self._error is not None:
            raise self._error

    def close(self) -> None:
        self._closing = True
        try:
            # wakes a thread blocked in accept()
            self._listener.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self._listener.close()

    def __enter__(self) -> "Emulator":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
