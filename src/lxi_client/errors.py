from typing import Optional


class LxiError(Exception):
    """Base class for errors raised by lxi_client."""


class AlreadyConnected(LxiError):
    """connect() called while a connection is already open."""

    def __init__(self, address):
        self.address = address
        super().__init__(f"Already connected to {address[0]}:{address[1]}")


class NotConnected(LxiError):
    """I/O or disconnect attempted without an open connection."""

    def __init__(self, address):
        self.address = address
        super().__init__(f"Not connected to {address[0]}:{address[1]}")


class NetworkFailure(LxiError):
    """
    OS-level failure while connecting, writing, flushing or reading.
    The original OSError is kept in ``error`` (and as ``__cause__``).
    """

    def __init__(self, action: str, error: OSError):
        self.action = action
        self.error = error
        super().__init__(f"{action} failed: {error}")

    @property
    def errno(self) -> Optional[int]:
        return self.error.errno
