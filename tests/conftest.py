"""
Pytest configuration and fixtures for all tests.

Provides builders for DNS reply datagrams and fake UDP endpoints so no
test ever talks to a real resolver.
"""

import os
import socket
import struct
import sys
import threading
from unittest.mock import MagicMock

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mailcheck.dns_codec import HEADER_SIZE, QTYPE_MX, encode_name


def build_reply(query: bytes, answers: int = 0, txid=None, flags: int = 0x8180,
                rtype: int = QTYPE_MX) -> bytes:
    """
    Build a response datagram for a query.

    The question is echoed and each answer uses a compression pointer to
    the question name at offset 12.
    """
    query_id, = struct.unpack_from('!H', query, 0)
    if txid is None:
        txid = query_id
    header = struct.pack('!HHHHHH', txid, flags, 1, answers, 0, 0)
    body = bytearray(query[HEADER_SIZE:])
    for index in range(answers):
        rdata = struct.pack('!H', 10 * (index + 1)) + encode_name(f'mx{index}.example.net')
        body += b'\xc0\x0c' + struct.pack('!HHIH', rtype, 1, 300, len(rdata)) + rdata
    return header + bytes(body)


@pytest.fixture
def dns_reply():
    """Builder for DNS response datagrams answering a given query."""
    return build_reply


@pytest.fixture
def fake_udp_socket():
    """
    Factory for a mock UDP socket whose reply is computed from the query.

    The reply callable receives the sent query bytes and returns the
    datagram to hand back, or raises to simulate a socket failure.
    """
    def factory(reply):
        sock = MagicMock()
        sock.__enter__.return_value = sock
        sent = []

        def sendto(data, address):
            sent.append((data, address))
            return len(data)

        def recvfrom(size):
            return reply(sent[-1][0]), sent[-1][1]

        sock.sendto.side_effect = sendto
        sock.recvfrom.side_effect = recvfrom
        sock.sent = sent
        return sock

    return factory


class LocalDnsServer:
    """One-shot UDP responder bound to 127.0.0.1."""

    def __init__(self, reply=None):
        self.reply = reply
        self.queries = []
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(('127.0.0.1', 0))
        self.sock.settimeout(5)
        self.port = self.sock.getsockname()[1]
        self.thread = threading.Thread(target=self._serve, daemon=True)

    @property
    def address(self) -> str:
        return f'127.0.0.1:{self.port}'

    def _serve(self):
        try:
            data, peer = self.sock.recvfrom(4096)
        except OSError:
            return
        self.queries.append(data)
        if self.reply is not None:
            self.sock.sendto(self.reply(data), peer)

    def start(self):
        self.thread.start()
        return self

    def close(self):
        self.sock.close()
        self.thread.join(timeout=5)


@pytest.fixture
def local_dns_server():
    """Factory for LocalDnsServer instances, closed after the test."""
    servers = []

    def factory(reply=None):
        server = LocalDnsServer(reply).start()
        servers.append(server)
        return server

    yield factory

    for server in servers:
        server.close()
