"""
Resolver Module

Sends hand-built DNS queries over UDP and reports whether records exist.
"""

import ipaddress
import logging
import socket
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from .dns_codec import (
    QTYPE_A,
    QTYPE_AAAA,
    QTYPE_MX,
    DnsAnswer,
    DnsHeader,
    DnsResponse,
    build_query,
    decode_response,
    encode_name,
)
from .errors import DnsError

logger = logging.getLogger(__name__)

DEFAULT_DNS_SERVER = '8.8.8.8:53'
DEFAULT_DNS_PORT = 53
DEFAULT_TIMEOUT = 2.0
MAX_DATAGRAM_SIZE = 4096

RCODE_NOERROR = 0
RCODE_NXDOMAIN = 3


def parse_server_address(server: str) -> Tuple[str, int]:
    """
    Parse a resolver address into (host, port).

    Accepts 'host', 'host:port', '[ipv6]:port' and a bare IPv6 address.

    Raises:
        ValueError: if the address is empty or the port is invalid
    """
    server = server.strip()
    if not server:
        raise ValueError("DNS server address is empty")

    if server.startswith('['):
        host, sep, rest = server[1:].partition(']')
        if not sep or not host:
            raise ValueError(f"Invalid DNS server address: {server!r}")
        port_text = rest[1:] if rest.startswith(':') else rest
    elif server.count(':') == 1:
        host, _, port_text = server.partition(':')
    else:
        host, port_text = server, ''

    if not host:
        raise ValueError(f"Invalid DNS server address: {server!r}")
    if not port_text:
        return host, DEFAULT_DNS_PORT

    try:
        port = int(port_text)
    except ValueError as err:
        raise ValueError(f"Invalid DNS server port in {server!r}") from err
    if not 0 < port < 65536:
        raise ValueError(f"DNS server port out of range in {server!r}")
    return host, port


class ResolverBase(ABC):
    """Abstract base class for resolvers used by the DNS rules."""

    @abstractmethod
    def query(self, domain: str, qtype: int) -> DnsResponse:
        """
        Perform one lookup.

        Args:
            domain: The domain to query
            qtype: The record type to ask for

        Returns:
            The decoded response

        Raises:
            DnsError: if the lookup fails
        """

    def resolve_mx(self, domain: str) -> bool:
        """
        Check if MX record exists for a domain.

        Returns:
            True if at least one answer came back, False if none did
        """
        return self.query(domain, QTYPE_MX).ancount > 0

    def has_address(self, domain: str) -> bool:
        """Check if the domain has an A record, falling back to AAAA."""
        if self.query(domain, QTYPE_A).ancount > 0:
            return True
        return self.query(domain, QTYPE_AAAA).ancount > 0


class MxResolver(ResolverBase):
    """
    UDP resolver that performs exactly one request/response per lookup.

    Example:
        >>> resolver = MxResolver('1.1.1.1:53', timeout=1.5)
        >>> resolver.resolve_mx('example.com')
        True
    """

    def __init__(self, server: str = DEFAULT_DNS_SERVER, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize the resolver.

        Args:
            server: Resolver address as 'host:port'
            timeout: Seconds to wait for the reply datagram
        """
        if timeout <= 0:
            raise ValueError("DNS timeout must be positive")
        self.server = server
        self.host, self.port = parse_server_address(server)
        self.timeout = timeout

    def _open_socket(self, address) -> socket.socket:
        family = socket.AF_INET6 if ':' in address[0] else socket.AF_INET
        return socket.socket(family, socket.SOCK_DGRAM)

    def _check_peer(self, peer) -> None:
        """Reject a reply from another address when the server is an IP literal."""
        try:
            expected = ipaddress.ip_address(self.host)
        except ValueError:
            return
        try:
            received = ipaddress.ip_address(peer[0].split('%')[0])
        except ValueError as exc:
            raise DnsError(f"DNS reply from unexpected address {peer[0]!r}") from exc
        if received != expected or peer[1] != self.port:
            logger.warning("Ignoring DNS reply from %s:%s, expected %s",
                           peer[0], peer[1], self.server)
            raise DnsError(f"DNS reply from unexpected address {peer[0]}:{peer[1]}")

    def query(self, domain: str, qtype: int) -> DnsResponse:
        dns_query = build_query(domain, qtype)
        address = (self.host, self.port)

        try:
            with self._open_socket(address) as sock:
                sock.settimeout(self.timeout)
                sock.sendto(dns_query.wire, address)
                data, peer = sock.recvfrom(MAX_DATAGRAM_SIZE)
        except socket.timeout as exc:
            logger.warning("DNS query for %s timed out after %ss (server %s)",
                           domain, self.timeout, self.server)
            raise DnsError(f"DNS query timed out after {self.timeout}s") from exc
        except OSError as exc:
            logger.warning("DNS query for %s failed: %s", domain, exc)
            raise DnsError(f"DNS socket error: {exc}") from exc

        self._check_peer(peer)
        response = decode_response(data, expected_id=dns_query.id)
        if response.header.rcode not in (RCODE_NOERROR, RCODE_NXDOMAIN):
            logger.warning("DNS query for %s failed with rcode %d (server %s)",
                           domain, response.header.rcode, self.server)
            raise DnsError(f"DNS server returned rcode {response.header.rcode}")
        logger.debug("DNS %s query for %s (id=%d): rcode=%d ancount=%d",
                     qtype, domain, dns_query.id, response.header.rcode, response.ancount)
        return response


class MockResolver(ResolverBase):
    """
    Mock resolver for testing purposes.

    Answers from a table of canned answer counts keyed by domain, or by
    (domain, qtype) for type-specific answers.
    """

    def __init__(self, responses: Optional[Dict] = None):
        """
        Initialize the mock resolver.

        Args:
            responses: Mapping of domain or (domain, qtype) to an answer
                count, or to an exception instance to raise
                e.g., {'gmail.com': 1, ('v6only.test', 28): 1}
        """
        self.responses = dict(responses or {})
        self.call_history = []

    def set_response(self, domain: str, answers, qtype: Optional[int] = None):
        key = domain if qtype is None else (domain, qtype)
        self.responses[key] = answers

    def query(self, domain: str, qtype: int) -> DnsResponse:
        self.call_history.append((domain, qtype))
        answers = self.responses.get((domain, qtype), self.responses.get(domain, 0))
        if isinstance(answers, Exception):
            raise answers

        header = DnsHeader(id=0, flags=0x8180, qdcount=1, ancount=answers,
                           nscount=0, arcount=0)
        records = [DnsAnswer(rtype=qtype, rclass=1, ttl=300, rdlength=0)
                   for _ in range(answers)]
        return DnsResponse(header=header, question_name=encode_name(domain), answers=records)

    def reset_history(self):
        self.call_history = []
