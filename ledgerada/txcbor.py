#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# txcbor.py
#
# Offline look at a (Byron era) Cardano transaction, so we can check
# what the device says it parsed out of it.
#
#   [ [inputs...], [outputs...], {attributes} ]
#   output = [ [ tag24(address payload), crc32 ], amount ]
#
import cbor2, base58
from collections import namedtuple
from .exceptions import ValidationError
from .utils import parse_hex

TxOut = namedtuple('TxOut', 'address checksum amount')
TxInfo = namedtuple('TxInfo', 'inputs outputs')

def parse_tx(raw):
    # decode CBOR of a transaction; raise ValidationError if not shaped right
    raw = parse_hex(raw)
    try:
        tx = cbor2.loads(raw)
    except (cbor2.CBORDecodeError, ValueError) as exc:
        raise ValidationError(f"Bad CBOR in transaction: {exc}")

    if not isinstance(tx, list) or len(tx) != 3:
        raise ValidationError("Transaction must be a 3 element array")

    inputs, outputs, _ = tx
    if not isinstance(inputs, list) or not isinstance(outputs, list):
        raise ValidationError("Transaction inputs/outputs must be arrays")

    outs = []
    for o in outputs:
        try:
            (addr, amount) = o
            (payload, crc) = addr
        except (TypeError, ValueError):
            raise ValidationError(f"Malformed transaction output: {o!r}")

        if isinstance(payload, cbor2.CBORTag):
            payload = payload.value

        outs.append(TxOut(address=cbor2.dumps([cbor2.CBORTag(24, payload), crc]),
                          checksum=crc, amount=amount))

    return TxInfo(inputs=inputs, outputs=outs)

def render_address(address):
    # text form of an address: base58 of its CBOR encoding
    return base58.b58encode(address).decode('ascii')

def check_tx_summary(raw, summary):
    # Compare device's reply to SET_TX against our own decode.
    # - raises ValueError on any difference
    info = parse_tx(raw)

    if summary.input_count != len(info.inputs):
        raise ValueError("device saw %d inputs, expected %d"
                            % (summary.input_count, len(info.inputs)))
    if summary.output_count != len(info.outputs):
        raise ValueError("device saw %d outputs, expected %d"
                            % (summary.output_count, len(info.outputs)))

    for idx, (got, exp) in enumerate(zip(summary.outputs, info.outputs)):
        if got.amount != exp.amount:
            raise ValueError(f"output #{idx}: device shows amount {got.amount}, "
                             f"transaction has {exp.amount}")

    return info

# EOF
