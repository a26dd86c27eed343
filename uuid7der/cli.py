"""uuid7der command line: create, convert and inspect DER-encoded UUIDv7 values."""

import argparse
import sys

from . import der, jer, raw, uuid7


def _read_input(path) -> bytes:
    if path in (None, '-'):
        return sys.stdin.buffer.read()
    with open(path, 'rb') as f:
        return f.read()

def _write_bytes(data: bytes):
    sys.stdout.buffer.write(data)
    sys.stdout.buffer.flush()

def _status(args, message):
    # stdout carries the payload, so status lines go to stderr
    if args.verbose:
        print("[+] " + message, file=sys.stderr)


def cmd_new(args):
    u = uuid7.new_uuid7(args.unix_ts_ms)
    _status(args, "Generated UUIDv7 %s" % u)
    if args.raw:
        out = raw.encode_raw(uuid7.RawUuidV7.from_int(u.int))
    else:
        out = der.encode(der.UuidV7Record.from_uuid(u))
    _status(args, "Writing %d DER bytes" % len(out))
    _write_bytes(out)

def cmd_der2jer(args):
    data = _read_input(args.file)
    _status(args, "Read %d DER bytes" % len(data))
    if args.raw:
        text = jer.render_raw(raw.decode_raw(data))
    else:
        text = jer.render(der.decode(data))
    print(text)

def cmd_jer2der(args):
    text = _read_input(args.file).decode('utf-8')
    _write_bytes(der.encode(jer.parse(text)))

def cmd_dump(args):
    print(raw.dump(_read_input(args.file)))

def cmd_show(args):
    data = _read_input(args.file)
    if args.raw:
        value = raw.decode_raw(data).to_int()
    else:
        value = der.decode(data).to_int()
    fields = uuid7.RawUuidV7.from_int(value)
    print("uuid:       %s" % der.UuidV7Record.from_int(value).to_uuid())
    print("unix_ts_ms: %d" % fields.unix_ts_ms)
    print("version:    %d" % fields.version)
    print("rand_a:     0x%03x" % fields.rand_a)
    print("variant:    %d" % fields.variant)
    print("rand_b:     0x%016x" % fields.rand_b)
    uuid7.validate(value)
    _status(args, "Valid UUIDv7")

def cmd_schema(args):
    print(raw.SCHEMA, end='')


def build_parser():
    parser = argparse.ArgumentParser(prog='uuid7der', description='UUIDv7 values as ASN.1 DER and JER')
    parser.add_argument('-v', '--verbose', action='store_true', help="print progress to stderr")
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('new', help="write a new UUIDv7 as DER to stdout")
    p.add_argument('--unix-ts-ms', type=int, default=None, help="timestamp to embed (default: now)")
    p.add_argument('--raw', action='store_true', help="use the per-field RawUuidV7 type")
    p.set_defaults(func=cmd_new)

    p = sub.add_parser('der2jer', help="convert DER to JER text")
    p.add_argument('--raw', action='store_true', help="input is a RawUuidV7")
    p.add_argument('file', nargs='?', help="DER input (default: stdin)")
    p.set_defaults(func=cmd_der2jer)

    p = sub.add_parser('jer2der', help="convert JER text to DER")
    p.add_argument('file', nargs='?', help="JER input (default: stdin)")
    p.set_defaults(func=cmd_jer2der)

    p = sub.add_parser('dump', help="print the DER structure")
    p.add_argument('file', nargs='?', help="DER input (default: stdin)")
    p.set_defaults(func=cmd_dump)

    p = sub.add_parser('show', help="print the UUID and its fields")
    p.add_argument('--raw', action='store_true', help="input is a RawUuidV7")
    p.add_argument('file', nargs='?', help="DER input (default: stdin)")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser('schema', help="print the ASN.1 module")
    p.set_defaults(func=cmd_schema)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        args.func(args)
    except (ValueError, OSError) as e:
        print("[-] Error: %s" % e, file=sys.stderr)
        sys.exit(1)
    return 0
