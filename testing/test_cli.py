#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# Command line, against a scripted transport.
#
import pytest, cbor2
from click.testing import CliRunner
from ledgerada import cli
from ledgerada.proto import AdaLedger
from ledgerada.utils import B2A, pack_amount

@pytest.fixture
def run(monkeypatch, scripted):
    # run a command with device giving these responses
    def doit(args, responses):
        tr = scripted(responses)
        monkeypatch.setattr(cli, 'find_first', lambda: AdaLedger(tr))
        result = CliRunner().invoke(cli.main, args)
        return result, tr
    return doit

def test_version(run):
    result, tr = run(['version'], ['0100039000'])
    assert result.exit_code == 0
    assert result.output.strip() == '1.0.3'

def test_prefix_alias(run):
    result, tr = run(['ver'], ['0200009000'])
    assert result.output.strip() == '2.0.0'

def test_pubkey(run):
    result, tr = run(['pubkey', '0x80000001'], ['02abcd9000'])
    assert result.exit_code == 0
    assert result.output.strip() == 'abcd'
    assert tr.sent == ['800102000000000480000001']

def test_bad_index(run):
    result, tr = run(['pubkey', 'xyz'], [])
    assert result.exit_code != 0
    assert tr.sent == []

def test_sign(run):
    body = bytes([1, 1]) + b'addr'.ljust(12, b'\0') + pack_amount(5)
    result, tr = run(['sign', '00112233', '0xF005BA11', '0x80000000'],
                        [B2A(body) + '9000', 'aa9000', 'bb9000'])
    assert result.exit_code == 0
    assert result.output.splitlines() == ['0xf005ba11: aa', '0x80000000: bb']

def test_settx_bad_cbor(run):
    # device parsed something, but we cannot: not a disagreement
    body = bytes([1, 1]) + b'addr'.ljust(12, b'\0') + pack_amount(5)
    result, tr = run(['settx', '00112233'], [B2A(body) + '9000'])
    assert result.exit_code == 1
    assert 'Cannot decode transaction' in result.output
    assert 'disagrees' not in result.output

def test_settx_mismatch(run):
    tx = cbor2.dumps([[[0, cbor2.CBORTag(24, bytes(4))]],
                      [[[cbor2.CBORTag(24, bytes(20)), 1234], 7]], {}])
    body = bytes([1, 1]) + b'addr'.ljust(12, b'\0') + pack_amount(5)
    result, tr = run(['settx', B2A(tx)], [B2A(body) + '9000'])
    assert result.exit_code == 1
    assert 'Device disagrees with transaction' in result.output

    body = bytes([1, 1]) + b'addr'.ljust(12, b'\0') + pack_amount(7)
    result, tr = run(['settx', B2A(tx)], [B2A(body) + '9000'])
    assert result.exit_code == 0
    assert 'Matches transaction.' in result.output

def test_no_device(monkeypatch):
    monkeypatch.setattr(cli, 'find_first', lambda: None)
    result = CliRunner().invoke(cli.main, ['version'])
    assert result.exit_code == 1
    assert 'No Ledger found' in result.output

# EOF
