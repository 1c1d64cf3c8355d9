"""
DNS Message Codec Module

Builds single-question DNS queries and decodes just enough of a response
to count its answer records (RFC 1035 subset).
"""

import secrets
import struct
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import DnsError

HEADER_FORMAT = '!HHHHHH'
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
QUESTION_TAIL_FORMAT = '!HH'
RECORD_FIXED_FORMAT = '!HHIH'
RECORD_FIXED_SIZE = struct.calcsize(RECORD_FIXED_FORMAT)

QTYPE_A = 1
QTYPE_MX = 15
QTYPE_AAAA = 28
QCLASS_IN = 1

FLAG_QR = 0x8000
FLAG_RD = 0x0100
QUERY_FLAGS = FLAG_RD

MAX_LABEL_LENGTH = 63
MAX_NAME_LENGTH = 255

POINTER_MASK = 0xC0


@dataclass(frozen=True)
class DnsQuery:
    """An encoded DNS query and the values needed to match its reply."""
    id: int
    domain: str
    qtype: int
    wire: bytes


@dataclass(frozen=True)
class DnsHeader:
    """The fixed 12-byte DNS message header."""
    id: int
    flags: int
    qdcount: int
    ancount: int
    nscount: int
    arcount: int

    @property
    def is_response(self) -> bool:
        return bool(self.flags & FLAG_QR)

    @property
    def rcode(self) -> int:
        return self.flags & 0x000F


@dataclass(frozen=True)
class DnsAnswer:
    """Fixed fields of one answer record. RDATA is skipped, not kept."""
    rtype: int
    rclass: int
    ttl: int
    rdlength: int


@dataclass
class DnsResponse:
    """
    A decoded DNS response.

    Attributes:
        header: The parsed message header
        question_name: Raw wire bytes of the echoed question name
        answers: One DnsAnswer per answer record consumed
    """
    header: DnsHeader
    question_name: bytes
    answers: List[DnsAnswer] = field(default_factory=list)

    @property
    def ancount(self) -> int:
        return self.header.ancount

    @property
    def answer_types(self) -> List[int]:
        return [answer.rtype for answer in self.answers]

    def has_answers(self, rtype: Optional[int] = None) -> bool:
        """Whether any answer was returned, optionally of a given type."""
        if rtype is None:
            return self.ancount > 0
        return rtype in self.answer_types


def encode_name(domain: str) -> bytes:
    """
    Encode a domain name as length-prefixed labels ending in a zero byte.

    Args:
        domain: Dotted domain name; one trailing dot is allowed

    Returns:
        The wire-format name

    Raises:
        DnsError: if a label is empty, non-ASCII, longer than 63 bytes,
            or the encoded name exceeds 255 bytes
    """
    name = domain[:-1] if domain.endswith('.') else domain
    if not name:
        raise DnsError("Cannot encode an empty domain name")

    encoded = bytearray()
    for label in name.split('.'):
        try:
            raw = label.encode('ascii')
        except UnicodeEncodeError as exc:
            raise DnsError(f"Label {label!r} is not ASCII") from exc
        if not raw:
            raise DnsError(f"Empty label in domain {domain!r}")
        if len(raw) > MAX_LABEL_LENGTH:
            raise DnsError(
                f"Label {label!r} exceeds maximum length of {MAX_LABEL_LENGTH} bytes"
            )
        encoded.append(len(raw))
        encoded.extend(raw)
    encoded.append(0)

    if len(encoded) > MAX_NAME_LENGTH:
        raise DnsError(f"Domain name exceeds maximum length of {MAX_NAME_LENGTH} bytes")
    return bytes(encoded)


def build_query(domain: str, qtype: int = QTYPE_MX, txid: Optional[int] = None) -> DnsQuery:
    """
    Build a standard recursive query with a single question.

    Args:
        domain: The domain to query
        qtype: Record type to ask for (MX by default)
        txid: Transaction id; a random 16-bit id is drawn when omitted

    Returns:
        DnsQuery holding the id and the encoded message
    """
    if txid is None:
        txid = secrets.randbits(16)
    header = struct.pack(HEADER_FORMAT, txid, QUERY_FLAGS, 1, 0, 0, 0)
    question = encode_name(domain) + struct.pack(QUESTION_TAIL_FORMAT, qtype, QCLASS_IN)
    return DnsQuery(id=txid, domain=domain, qtype=qtype, wire=header + question)


def _require(data: bytes, offset: int, size: int) -> None:
    if offset + size > len(data):
        raise DnsError(
            f"Truncated DNS message: need {size} byte(s) at offset {offset}, "
            f"have {len(data)}"
        )


def skip_name(data: bytes, offset: int) -> int:
    """
    Return the offset just past the name starting at `offset`.

    A compression pointer ends the name; it is not followed.
    """
    while True:
        _require(data, offset, 1)
        length = data[offset]
        if length & POINTER_MASK == POINTER_MASK:
            _require(data, offset, 2)
            return offset + 2
        if length & POINTER_MASK:
            raise DnsError(f"Unsupported label type 0x{length:02x} at offset {offset}")
        offset += 1
        if length == 0:
            return offset
        _require(data, offset, length)
        offset += length


def split_labels(wire_name: bytes) -> List[str]:
    """Re-derive the label sequence from an uncompressed wire name."""
    labels = []
    offset = 0
    while True:
        _require(wire_name, offset, 1)
        length = wire_name[offset]
        if length & POINTER_MASK:
            raise DnsError("Compressed names cannot be split into labels")
        offset += 1
        if length == 0:
            return labels
        _require(wire_name, offset, length)
        labels.append(wire_name[offset:offset + length].decode('ascii'))
        offset += length


def decode_header(data: bytes) -> DnsHeader:
    _require(data, 0, HEADER_SIZE)
    return DnsHeader(*struct.unpack_from(HEADER_FORMAT, data, 0))


def decode_response(data: bytes, expected_id: Optional[int] = None) -> DnsResponse:
    """
    Decode a DNS response far enough to count its answer records.

    Args:
        data: The received datagram
        expected_id: Transaction id of the query this should answer

    Returns:
        DnsResponse with the header, question name and answer records

    Raises:
        DnsError: on a short or malformed message, a message that is not a
            response, a transaction id mismatch, or a question count other
            than one
    """
    header = decode_header(data)

    if not header.is_response:
        raise DnsError("DNS message is a query, not a response")
    if expected_id is not None and header.id != expected_id:
        raise DnsError(
            f"Transaction id mismatch: expected {expected_id}, got {header.id}"
        )
    if header.qdcount != 1:
        raise DnsError(f"Expected exactly one question, got {header.qdcount}")

    offset = HEADER_SIZE
    name_end = skip_name(data, offset)
    question_name = data[offset:name_end]
    _require(data, name_end, struct.calcsize(QUESTION_TAIL_FORMAT))
    offset = name_end + struct.calcsize(QUESTION_TAIL_FORMAT)

    answers = []
    for _ in range(header.ancount):
        offset = skip_name(data, offset)
        _require(data, offset, RECORD_FIXED_SIZE)
        rtype, rclass, ttl, rdlength = struct.unpack_from(RECORD_FIXED_FORMAT, data, offset)
        offset += RECORD_FIXED_SIZE
        _require(data, offset, rdlength)
        offset += rdlength
        answers.append(DnsAnswer(rtype=rtype, rclass=rclass, ttl=ttl, rdlength=rdlength))

    return DnsResponse(header=header, question_name=question_name, answers=answers)
