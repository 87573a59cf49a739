#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# Offline transaction decode, and checking device's view against it.
#
import pytest, cbor2
from ledgerada.txcbor import parse_tx, render_address, check_tx_summary
from ledgerada.decoders import TxSummary, TxOutput
from ledgerada.exceptions import ValidationError

# one input, one output
SAMPLE_TX = '839f8200d8185826825820e981442c2be40475bb42193ca35907861d90715854de6fcba767b98f1789b51219439aff9f8282d818584a83581ce7fe8e468d2249f18cd7bf9aec0d4374b7d3e18609ede8589f82f7f0a20058208200581c240596b9b63fc010c06fbe92cf6f820587406534795958c411e662dc014443c0688e001a6768cc861b0037699e3ea6d064ffa0'

def make_tx(amounts, n_in=1):
    ins = [[0, cbor2.CBORTag(24, bytes(38))] for _ in range(n_in)]
    outs = [[[cbor2.CBORTag(24, bytes([n])*20), 1000+n], amt] for n, amt in enumerate(amounts)]
    return cbor2.dumps([ins, outs, {}])

def test_sample():
    info = parse_tx(SAMPLE_TX)
    assert len(info.inputs) == 1
    assert len(info.outputs) == 1

    o, = info.outputs
    assert o.checksum == 0x6768cc86
    assert o.amount == 0x0037699e3ea6d064

    # address re-encodes to same bytes as in transaction
    assert o.address.hex() in SAMPLE_TX
    assert o.address.startswith(bytes.fromhex('82d818584a'))

def test_render_address():
    import base58
    info = parse_tx(SAMPLE_TX)
    addr = info.outputs[0].address
    assert base58.b58decode(render_address(addr)) == addr

def test_made_up():
    info = parse_tx(make_tx([5, 2**64-1, 0], n_in=3))
    assert len(info.inputs) == 3
    assert [o.amount for o in info.outputs] == [5, 2**64-1, 0]
    assert [o.checksum for o in info.outputs] == [1000, 1001, 1002]

@pytest.mark.parametrize('raw', [
    b'', b'\xff', cbor2.dumps(5), cbor2.dumps([[], []]),
    cbor2.dumps([[], 3, {}]), cbor2.dumps([[], [7], {}]),
])
def test_bad_tx(raw):
    with pytest.raises(ValidationError):
        parse_tx(raw)

def test_check_summary():
    raw = make_tx([5, 6], n_in=2)
    good = TxSummary(2, 2, [TxOutput('x', 5), TxOutput('y', 6)])
    assert len(check_tx_summary(raw, good).outputs) == 2

    for bad in [TxSummary(1, 2, good.outputs),
                TxSummary(2, 1, good.outputs[0:1]),
                TxSummary(2, 2, [TxOutput('x', 5), TxOutput('y', 7)])]:
        with pytest.raises(ValueError):
            check_tx_summary(raw, bad)

# EOF
