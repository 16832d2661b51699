"""
Unit tests for line framing: terminator stripping and LxiStream over a socket pair.
"""

import pytest

from lxi_client.devices.stream import LxiStream, strip_terminator


class TestStripTerminator:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("abc\r\n", "abc"),
            ("abc\n", "abc"),
            ("abc", "abc"),
            ("\n", ""),
            ("\r\n", ""),
            ("", ""),
        ],
    )
    def test_strips_trailing_terminator(self, raw, expected):
        assert strip_terminator(raw) == expected

    def test_lone_cr_is_kept(self):
        assert strip_terminator("abc\r") == "abc\r"

    def test_cr_not_before_lf_is_kept(self):
        assert strip_terminator("a\rb\n") == "a\rb"

    def test_only_one_terminator_removed(self):
        assert strip_terminator("abc\r\n\r\n") == "abc\r\n"
        assert strip_terminator("abc\n\n") == "abc\n"


class TestLxiStream:
    def test_send_line_appends_crlf_and_flushes(self, sock_pair):
        client, peer = sock_pair
        stream = LxiStream(client)

        stream.send_line("*RST")

        # flushed: the bytes are already on the wire without closing anything
        assert peer.recv(64) == b"*RST\r\n"

    def test_send_line_encodes_utf8(self, sock_pair):
        client, peer = sock_pair
        stream = LxiStream(client)

        stream.send_line("µV")

        assert peer.recv(64) == "µV\r\n".encode("utf-8")

    def test_receive_line_strips_crlf(self, sock_pair):
        client, peer = sock_pair
        stream = LxiStream(client)
        peer.sendall(b"RIGOL,DS1054Z\r\n")

        assert stream.receive_line() == "RIGOL,DS1054Z"

    def test_receive_line_reads_one_line_at_a_time(self, sock_pair):
        client, peer = sock_pair
        stream = LxiStream(client)
        peer.sendall(b"first\r\nsecond\nthird\r\n")

        assert stream.receive_line() == "first"
        assert stream.receive_line() == "second"
        assert stream.receive_line() == "third"

    def test_receive_line_without_terminator_at_eof(self, sock_pair):
        client, peer = sock_pair
        stream = LxiStream(client)
        peer.sendall(b"abc")
        peer.close()

        assert stream.receive_line() == "abc"
        assert stream.receive_line() == ""

    def test_receive_line_replaces_invalid_bytes(self, sock_pair):
        client, peer = sock_pair
        stream = LxiStream(client)
        peer.sendall(b"ok\xff\xfe\r\n")

        assert stream.receive_line() == "ok\ufffd\ufffd"

    def test_request_line_writes_then_reads(self, sock_pair):
        client, peer = sock_pair
        stream = LxiStream(client)
        peer.sendall(b"5.0000\r\n")

        assert stream.request_line("MEAS:VOLT?") == "5.0000"
        assert peer.recv(64) == b"MEAS:VOLT?\r\n"

    def test_close_releases_socket(self, sock_pair):
        client, _ = sock_pair
        stream = LxiStream(client)

        stream.close()

        assert client.fileno() == -1

    def test_send_line_replaces_unencodable_characters(self, sock_pair):
        client, peer = sock_pair
        stream = LxiStream(client)

        stream.send_line("a\ud800b")

        assert peer.recv(64) == b"a?b\r\n"
