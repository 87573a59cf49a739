#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# chunking.py
#
# Split a payload over several frames. The device keeps no state between
# frames except what each header tells it:
#
# - P1: first chunk, or continuation
# - P2: whole payload fits in one frame, or not
# - LC: total payload length on the first chunk, only the chunk's own
#       length on every later one (firmware expects exactly this)
#
from collections import namedtuple
from .constants import *
from .apdu import encode_apdu, split_status
from .exceptions import ValidationError
from .status import status_error
from .utils import B2A

ChunkPlan = namedtuple('ChunkPlan', 'offset length is_first is_last')

def plan_chunks(total, max_chunk=MAX_CHUNK_SIZE):
    # list of ChunkPlan covering 0..total
    # - a payload of exactly max_chunk is NOT a single frame (P2_MULTI)
    #   but still goes in one chunk
    assert max_chunk > 0
    rv = []
    offset = 0

    while offset != total:
        is_last = (total - offset) < max_chunk
        size = (total - offset) if is_last else max_chunk

        rv.append(ChunkPlan(offset, size, offset == 0, is_last))
        offset += size

    return rv

def chunk_apdus(ins, payload, max_apdu=MAX_APDU_SIZE):
    # Build the list of command frames (bytes) for a payload
    payload = bytes(payload)
    total = len(payload)
    max_chunk = max_apdu - HEADER_SIZE

    if not total:
        raise ValidationError("Nothing to send: empty payload")

    is_single = total < max_chunk
    p2 = P2_SINGLE if is_single else P2_MULTI

    rv = []
    for ch in plan_chunks(total, max_chunk):
        rv.append(encode_apdu(ins,
                        p1=(P1_FIRST if ch.is_first else P1_NEXT),
                        p2=p2,
                        data=payload[ch.offset:ch.offset+ch.length],
                        lc=(total if ch.is_first else ch.length)))

    return rv

def send_chunked(exchange, ins, payload, max_apdu=MAX_APDU_SIZE):
    # Send each frame, in order, waiting for each answer before next.
    # - exchange(apdu_hex, accepted) -> response hex, as transports provide
    # - first failure stops everything; nothing is retried
    # - returns body of the last response; earlier ones are just acks
    body = b''
    for apdu in chunk_apdus(ins, payload, max_apdu):
        resp = exchange(B2A(apdu), [SW_OKAY])

        body, sw = split_status(resp)
        if sw != SW_OKAY:
            raise status_error(sw)

    return body

# EOF
