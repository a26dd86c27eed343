"""UUIDv7 bit layout (RFC 9562).

Layout:
| unix_ts_ms (48 bits) | ver (4) | rand_a (12) | var (2) | rand_b (62) |
"""

import time
import uuid
from dataclasses import dataclass

from Cryptodome.Random import get_random_bytes

from .der import bi

VERSION = 0x7
VARIANT = 0x2


class UuidV7Error(ValueError):
    pass

class InvalidVersion(UuidV7Error):
    def __init__(self, version):
        super().__init__("version bits are %d, expected 7" % version)
        self.version = version

class InvalidVariant(UuidV7Error):
    def __init__(self, variant):
        super().__init__("variant bits are %d, expected 2" % variant)
        self.variant = variant


@dataclass(frozen=True)
class UuidV7Seeds:
    unix_ts_ms: int     # 48-bit Unix timestamp in milliseconds
    random_bytes: int   # 128 random bits, overwritten where the layout demands

    def __post_init__(self):
        if not 0 <= self.unix_ts_ms < (1 << 48):
            raise ValueError("unix_ts_ms must fit in 48 bits, got %r" % self.unix_ts_ms)
        if not 0 <= self.random_bytes < (1 << 128):
            raise ValueError("random_bytes must fit in 128 bits")

    def to_int(self) -> int:
        value = self.random_bytes

        # clear the top 48 bits and insert the timestamp
        value &= (1 << 80) - 1
        value |= self.unix_ts_ms << 80

        # version bits 76-79
        value &= ~(0xF << 76)
        value |= VERSION << 76

        # variant bits 62-63
        value &= ~(0x3 << 62)
        value |= VARIANT << 62
        return value


def unix_ts_ms(value: int) -> int:
    return value >> 80

def version(value: int) -> int:
    return (value >> 76) & 0xF

def rand_a(value: int) -> int:
    return (value >> 64) & 0xFFF

def variant(value: int) -> int:
    return (value >> 62) & 0x3

def rand_b(value: int) -> int:
    return value & 0x3FFF_FFFF_FFFF_FFFF


def validate(value: int) -> int:
    # returns value unchanged if version and variant bits say UUIDv7
    if version(value) != VERSION:
        raise InvalidVersion(version(value))
    if variant(value) != VARIANT:
        raise InvalidVariant(variant(value))
    return value


@dataclass(frozen=True)
class RawUuidV7:
    """The individual fields of a UUIDv7, as carried by the RawUuidV7 ASN.1 type."""

    unix_ts_ms: int
    version: int
    rand_a: int
    variant: int
    rand_b: int

    def __post_init__(self):
        for name, bits in (('unix_ts_ms', 48), ('version', 4), ('rand_a', 12),
                           ('variant', 2), ('rand_b', 62)):
            v = getattr(self, name)
            if not 0 <= v < (1 << bits):
                raise ValueError("%s must fit in %d bits, got %r" % (name, bits, v))

    @classmethod
    def from_int(cls, value: int) -> "RawUuidV7":
        if not 0 <= value < (1 << 128):
            raise ValueError("UUID value must fit in 128 bits")
        return cls(unix_ts_ms(value), version(value), rand_a(value), variant(value), rand_b(value))

    def to_int(self) -> int:
        return ((self.unix_ts_ms << 80) | (self.version << 76) | (self.rand_a << 64)
                | (self.variant << 62) | self.rand_b)


def new_uuid7(now_ms=None) -> uuid.UUID:
    # now_ms defaults to the current time
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    seeds = UuidV7Seeds(now_ms, bi(get_random_bytes(16)))
    return uuid.UUID(int=seeds.to_int())
