"""pyasn1 schema for the per-field UUIDv7 record."""

from pyasn1.codec.der import decoder, encoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import constraint, namedtype, univ

from .uuid7 import RawUuidV7

SCHEMA = """\
UuidV7 DEFINITIONS ::= BEGIN
    UuidV7Record ::= SEQUENCE {
        high INTEGER (0..18446744073709551615),
        low  INTEGER (0..18446744073709551615)
    }

    RawUuidV7 ::= SEQUENCE {
        unixTsMs INTEGER (0..281474976710655),
        version  INTEGER (0..15),
        randA    BIT STRING (SIZE (12)),
        variant  BIT STRING (SIZE (2)),
        randB    BIT STRING (SIZE (62))
    }
END
"""

# (field, ASN.1 name, bit width) for the BIT STRING members; widths are
# checked in from_asn1
BIT_FIELDS = (
    ('rand_a', 'randA', 12),
    ('variant', 'variant', 2),
    ('rand_b', 'randB', 62),
)


class RawUuidV7Asn1(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('unixTsMs', univ.Integer().subtype(
            subtypeSpec=constraint.ValueRangeConstraint(0, (1 << 48) - 1))),
        namedtype.NamedType('version', univ.Integer().subtype(
            subtypeSpec=constraint.ValueRangeConstraint(0, 15))),
        namedtype.NamedType('randA', univ.BitString()),
        namedtype.NamedType('variant', univ.BitString()),
        namedtype.NamedType('randB', univ.BitString()),
    )


def to_asn1(raw: RawUuidV7) -> RawUuidV7Asn1:
    record = RawUuidV7Asn1()
    record['unixTsMs'] = raw.unix_ts_ms
    record['version'] = raw.version
    for field, name, width in BIT_FIELDS:
        record[name] = "'%s'B" % format(getattr(raw, field), '0%db' % width)
    return record

def from_asn1(record) -> RawUuidV7:
    fields = {
        'unix_ts_ms': int(record['unixTsMs']),
        'version': int(record['version']),
    }
    for field, name, width in BIT_FIELDS:
        bits = record[name]
        if len(bits) != width:
            raise ValueError("%s must be %d bits, got %d" % (name, width, len(bits)))
        fields[field] = int(bits.asInteger())
    return RawUuidV7(**fields)


def encode_raw(raw: RawUuidV7) -> bytes:
    try:
        return encoder.encode(to_asn1(raw))
    except PyAsn1Error as e:
        raise ValueError("cannot encode RawUuidV7: %s" % e) from e

def decode_raw(data: bytes) -> RawUuidV7:
    data = bytes(data)
    try:
        record, rest = decoder.decode(data, asn1Spec=RawUuidV7Asn1())
        if rest:
            raise ValueError("%d trailing bytes after RawUuidV7" % len(rest))
        raw = from_asn1(record)
    except PyAsn1Error as e:
        raise ValueError("cannot decode RawUuidV7: %s" % e) from e
    if encode_raw(raw) != data:
        raise ValueError("RawUuidV7 is not in canonical DER form")
    return raw


def dump(data: bytes) -> str:
    # structural view of every DER value in data, schema-less
    out = []
    rest = bytes(data)
    while rest:
        try:
            value, rest = decoder.decode(rest)
        except PyAsn1Error as e:
            raise ValueError("cannot decode DER: %s" % e) from e
        out.append(value.prettyPrint())
    return "\n".join(out)
