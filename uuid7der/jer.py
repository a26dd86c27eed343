"""JSON Encoding Rules text for the UUID records.

INTEGER members are written as JSON numbers while they are at most
MAX_SAFE_INTEGER (2**53 - 1, the largest integer an IEEE double holds
exactly). Larger values are written as decimal strings, e.g.
``{"high":"18446744073709551615","low":1}``, so JSON readers that parse
numbers as doubles do not lose precision. ``parse`` accepts either form.
"""

import json

from .der import UuidV7Record
from .raw import BIT_FIELDS
from .uuid7 import RawUuidV7

MAX_SAFE_INTEGER = (1 << 53) - 1

_SEPARATORS = (',', ':')


def _jer_integer(n: int):
    if n <= MAX_SAFE_INTEGER:
        return n
    return str(n)

def _jer_bitstring(value: int, width: int) -> str:
    # fixed-size BIT STRING: hex of the bits, left-aligned in whole octets
    pad = (8 - width % 8) % 8
    return (value << pad).to_bytes((width + pad) // 8, 'big').hex().upper()


def render(record: UuidV7Record) -> str:
    return json.dumps({
        'high': _jer_integer(record.high),
        'low': _jer_integer(record.low),
    }, separators=_SEPARATORS)

def render_raw(raw: RawUuidV7) -> str:
    obj = {
        'unixTsMs': _jer_integer(raw.unix_ts_ms),
        'version': raw.version,
    }
    for field, name, width in BIT_FIELDS:
        obj[name] = _jer_bitstring(getattr(raw, field), width)
    return json.dumps(obj, separators=_SEPARATORS)


def _parse_integer(name, value) -> int:
    if isinstance(value, bool):
        raise ValueError("%s: expected an integer, got %r" % (name, value))
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit() and value.isascii():
        return int(value)
    raise ValueError("%s: expected an integer or decimal string, got %r" % (name, value))

def parse(text: str) -> UuidV7Record:
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError("not valid JSON: %s" % e) from e
    if not isinstance(obj, dict) or set(obj) != {'high', 'low'}:
        raise ValueError("expected an object with exactly the members high and low")
    return UuidV7Record(_parse_integer('high', obj['high']), _parse_integer('low', obj['low']))
