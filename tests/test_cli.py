"""Tests for the uuid7der command line."""

import io
import sys

import pytest

from uuid7der import cli
from uuid7der.der import UuidV7Record, decode, encode
from uuid7der.raw import decode_raw
from uuid7der.uuid7 import unix_ts_ms


@pytest.fixture
def der_file(tmp_path):
    path = tmp_path / 'uuid.der'
    path.write_bytes(bytes.fromhex('3006020100020101'))
    return str(path)


def test_new(capsysbinary):
    assert cli.main(['new', '--unix-ts-ms', '1234']) == 0
    out = capsysbinary.readouterr().out
    u = decode(out).to_uuid()
    assert u.version == 7
    assert unix_ts_ms(u.int) == 1234


def test_new_raw(capsysbinary):
    cli.main(['new', '--raw', '--unix-ts-ms', '99'])
    raw = decode_raw(capsysbinary.readouterr().out)
    assert raw.unix_ts_ms == 99
    assert raw.version == 7


def test_new_verbose_keeps_stdout_clean(capsysbinary):
    cli.main(['-v', 'new'])
    captured = capsysbinary.readouterr()
    decode(captured.out)
    assert b'[+] Generated UUIDv7' in captured.err


def test_der2jer(capsysbinary, der_file):
    cli.main(['der2jer', der_file])
    assert capsysbinary.readouterr().out == b'{"high":0,"low":1}\n'


def test_der2jer_stdin(capsysbinary, monkeypatch):
    data = encode(UuidV7Record(1 << 60, 2))
    monkeypatch.setattr(sys, 'stdin', io.TextIOWrapper(io.BytesIO(data)))
    cli.main(['der2jer'])
    assert capsysbinary.readouterr().out == b'{"high":"1152921504606846976","low":2}\n'


def test_der2jer_rejects_trailing(capsysbinary, tmp_path):
    path = tmp_path / 'bad.der'
    path.write_bytes(bytes.fromhex('300602010002010100'))
    with pytest.raises(SystemExit) as e:
        cli.main(['der2jer', str(path)])
    assert e.value.code == 1
    assert b'[-] Error' in capsysbinary.readouterr().err


def test_der2jer_missing_file(capsysbinary, tmp_path):
    with pytest.raises(SystemExit) as e:
        cli.main(['der2jer', str(tmp_path / 'missing.der')])
    assert e.value.code == 1


def test_jer2der(capsysbinary, tmp_path):
    path = tmp_path / 'uuid.json'
    path.write_text('{"high":0,"low":1}')
    cli.main(['jer2der', str(path)])
    assert capsysbinary.readouterr().out == bytes.fromhex('3006020100020101')


def test_show(capsysbinary, tmp_path):
    path = tmp_path / 'uuid.der'
    cli.main(['new', '--unix-ts-ms', '5'])
    path.write_bytes(capsysbinary.readouterr().out)
    cli.main(['show', str(path)])
    out = capsysbinary.readouterr().out
    assert b'unix_ts_ms: 5\n' in out
    assert b'version:    7\n' in out


def test_show_rejects_non_v7(capsysbinary, der_file):
    with pytest.raises(SystemExit):
        cli.main(['show', der_file])
    assert b'version bits are 0' in capsysbinary.readouterr().err


def test_dump(capsysbinary, tmp_path):
    path = tmp_path / 'uuid.der'
    path.write_bytes(encode(UuidV7Record(1234, 5678)))
    cli.main(['dump', str(path)])
    out = capsysbinary.readouterr().out
    assert b'1234' in out
    assert b'5678' in out


def test_schema(capsysbinary):
    cli.main(['schema'])
    assert b'RawUuidV7 ::= SEQUENCE' in capsysbinary.readouterr().out


RAW_DER = bytes.fromhex(
    '301f'
    '02060123456789ab'
    '020107'
    '030304abc0'
    '03020680'
    '0309020000000000000004'
)


@pytest.fixture
def raw_file(tmp_path):
    path = tmp_path / 'raw.der'
    path.write_bytes(RAW_DER)
    return str(path)


def test_der2jer_raw(capsysbinary, raw_file):
    cli.main(['der2jer', '--raw', raw_file])
    expected = ('{"unixTsMs":%d,"version":7,"randA":"ABC0","variant":"80",'
                '"randB":"0000000000000004"}\n' % 0x0123456789ab)
    assert capsysbinary.readouterr().out == expected.encode()


def test_show_raw(capsysbinary, raw_file):
    cli.main(['show', '--raw', raw_file])
    out = capsysbinary.readouterr().out
    assert b'unix_ts_ms: %d\n' % 0x0123456789ab in out
    assert b'version:    7\n' in out
    assert b'rand_a:     0xabc\n' in out
    assert b'variant:    2\n' in out
    assert b'rand_b:     0x0000000000000001\n' in out


def test_new_raw_then_der2jer_raw(capsysbinary, tmp_path):
    path = tmp_path / 'raw.der'
    cli.main(['new', '--raw', '--unix-ts-ms', '42'])
    path.write_bytes(capsysbinary.readouterr().out)
    cli.main(['der2jer', '--raw', str(path)])
    assert capsysbinary.readouterr().out.startswith(b'{"unixTsMs":42,"version":7,')


def test_der2jer_raw_rejects_record(capsysbinary, der_file):
    with pytest.raises(SystemExit) as e:
        cli.main(['der2jer', '--raw', der_file])
    assert e.value.code == 1
    assert b'[-] Error' in capsysbinary.readouterr().err


def test_new_rejects_out_of_range_timestamp(capsysbinary):
    with pytest.raises(SystemExit) as e:
        cli.main(['new', '--unix-ts-ms', '-1'])
    assert e.value.code == 1
    captured = capsysbinary.readouterr()
    assert captured.out == b''
    assert b'[-] Error: unix_ts_ms must fit in 48 bits' in captured.err
