"""
Shared fixtures: an emulator on an ephemeral localhost port and a socket pair
for driving the stream without a listener.
"""

import socket

import pytest

from lxi_client.emulator import Emulator


@pytest.fixture
def emulator():
    """Emulator serving one client on a background thread."""
    emu = Emulator(("localhost", 0)).start(connections=1)
    yield emu
    emu.close()


@pytest.fixture
def emulator_address(emulator):
    return ("localhost", emulator.address[1])


@pytest.fixture
def sock_pair():
    """(client, peer) connected sockets; both closed afterwards."""
    client, peer = socket.socketpair()
    yield client, peer
    client.close()
    peer.close()


@pytest.fixture
def unused_port():
    """A port nothing listens on (bound, read back, released)."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def listener():
    """Bare listening socket on localhost; the test accepts and scripts the peer."""
    server = socket.create_server(("localhost", 0))
    yield server
    server.close()
