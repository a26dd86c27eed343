"""DER codec for the two-INTEGER UUID record.

    UuidV7Record ::= SEQUENCE {
        high INTEGER (0..18446744073709551615),
        low  INTEGER (0..18446744073709551615)
    }
"""

import uuid
from dataclasses import dataclass

U64_MAX = (1 << 64) - 1

TAG_INTEGER = 0x02
TAG_SEQUENCE = 0x30


def ib(i, length=False):
    # converts integer to bytes
    if length is False:
        if i == 0:
            return b'\x00'
        length = (i.bit_length()+7)//8
    b = b''
    for _ in range(length):
        b = bytes([i & 0xff]) + b
        i >>= 8
    return b

def bi(b):
    # converts bytes to integer
    i = 0
    for byte in b:
        i <<= 8
        i |= byte
    return i


@dataclass(frozen=True)
class UuidV7Record:
    high: int
    low: int

    def __post_init__(self):
        for name in ('high', 'low'):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool) or not 0 <= v <= U64_MAX:
                raise ValueError("%s must be an unsigned 64-bit integer, got %r" % (name, v))

    @classmethod
    def from_int(cls, value: int) -> "UuidV7Record":
        if not 0 <= value < (1 << 128):
            raise ValueError("UUID value must fit in 128 bits")
        return cls(value >> 64, value & U64_MAX)

    @classmethod
    def from_uuid(cls, value: uuid.UUID) -> "UuidV7Record":
        return cls.from_int(value.int)

    def to_int(self) -> int:
        return (self.high << 64) | self.low

    def to_uuid(self) -> uuid.UUID:
        return uuid.UUID(int=self.to_int())


class DerError(ValueError):
    # base for all decode failures; offset is where the bad byte sits
    def __init__(self, message, offset):
        super().__init__("%s (offset %d)" % (message, offset))
        self.offset = offset

class TruncatedInput(DerError):
    pass

class UnexpectedTag(DerError):
    def __init__(self, expected, actual, offset):
        super().__init__("expected tag 0x%02x, got 0x%02x" % (expected, actual), offset)
        self.expected = expected
        self.actual = actual

class NonMinimalLength(DerError):
    pass

class TrailingBytes(DerError):
    pass

class IntegerOverflow(DerError):
    pass


#==== DER encoder start ====
def _der_len(n: int) -> bytes:
    if n < 0x80:
        return bytes([n])
    s = ib(n)
    return bytes([0x80 | len(s)]) + s

def _der_tlv(tag: int, content: bytes) -> bytes:
    return bytes([tag]) + _der_len(len(content)) + content

def _der_uint(n: int) -> bytes:
    body = ib(n)
    if body[0] & 0x80:
        body = b'\x00' + body  # keep INTEGER non-negative
    return _der_tlv(TAG_INTEGER, body)

def encode(record: UuidV7Record) -> bytes:
    return _der_tlv(TAG_SEQUENCE, _der_uint(record.high) + _der_uint(record.low))
#==== DER encoder end ====


#==== DER decoder start ====
def _read_header(data: bytes, offset: int, expected_tag: int):
    # returns (content length, content offset) of the TLV at offset
    if len(data) - offset < 2:
        raise TruncatedInput("need tag and length bytes", offset)
    tag = data[offset]
    if tag != expected_tag:
        raise UnexpectedTag(expected_tag, tag, offset)

    first = data[offset + 1]
    pos = offset + 2
    if first < 0x80:
        return first, pos
    if first == 0x80:
        raise NonMinimalLength("indefinite length is not allowed in DER", offset + 1)
    if first == 0xff:
        raise NonMinimalLength("reserved length octet 0xff", offset + 1)

    count = first & 0x7f
    if len(data) - pos < count:
        raise TruncatedInput("length needs %d more bytes" % count, pos)
    length_bytes = data[pos:pos + count]
    if length_bytes[0] == 0x00:
        raise NonMinimalLength("length has leading zero byte", pos)
    length = bi(length_bytes)
    if length < 0x80:
        raise NonMinimalLength("long form used for length %d" % length, offset + 1)
    return length, pos + count

def _read_uint64(content: bytes, offset: int) -> int:
    if not content:
        raise TruncatedInput("INTEGER has no content bytes", offset)
    if content[0] & 0x80:
        raise IntegerOverflow("INTEGER is negative", offset)
    if len(content) > 1 and content[0] == 0x00 and not content[1] & 0x80:
        raise NonMinimalLength("INTEGER has redundant leading zero", offset)
    value = bi(content)
    if value > U64_MAX:
        raise IntegerOverflow("INTEGER does not fit in 64 bits", offset)
    return value

def decode(data: bytes) -> UuidV7Record:
    data = bytes(data)
    length, pos = _read_header(data, 0, TAG_SEQUENCE)
    if len(data) - pos < length:
        raise TruncatedInput("SEQUENCE declares %d bytes, %d present" % (length, len(data) - pos), pos)
    end = pos + length
    if end < len(data):
        raise TrailingBytes("%d bytes after SEQUENCE" % (len(data) - end), end)

    values = []
    for _ in range(2):
        if pos >= end:
            raise TruncatedInput("SEQUENCE holds fewer than two INTEGERs", pos)
        n, content_pos = _read_header(data[:end], pos, TAG_INTEGER)
        if end - content_pos < n:
            raise TruncatedInput("INTEGER declares %d bytes, %d present" % (n, end - content_pos), content_pos)
        values.append(_read_uint64(data[content_pos:content_pos + n], content_pos))
        pos = content_pos + n

    if pos != end:
        raise TrailingBytes("SEQUENCE holds more than two INTEGERs", pos)
    return UuidV7Record(values[0], values[1])
#==== DER decoder end ====
