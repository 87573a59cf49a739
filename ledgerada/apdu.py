#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# apdu.py
#
# Frame codec: fixed 8-byte command header and the 2-byte status trailer.
#
#   buffer[0] = CLA (0x80)
#   buffer[1] = INS
#   buffer[2] = P1
#   buffer[3] = P2
#   buffer[4..7] = LC, big endian
#   buffer[8..] = data
#
# Never looks at what's inside the data.
#
import struct
from dataclasses import dataclass
from binascii import a2b_hex
from .constants import *
from .exceptions import DecodeError, ValidationError
from .utils import B2A

_HEADER = struct.Struct('>BBBBI')
assert _HEADER.size == HEADER_SIZE

@dataclass(frozen=True)
class Command:
    ins: int
    p1: int = 0
    p2: int = 0
    lc: int = 0
    data: bytes = b''
    cla: int = CLA

    def to_bytes(self):
        return _HEADER.pack(self.cla, self.ins, self.p1, self.p2, self.lc) + self.data

    def to_hex(self):
        return B2A(self.to_bytes())

    @classmethod
    def parse(cls, raw):
        # inverse of to_bytes; LC is returned as sent, not checked vs. data
        if isinstance(raw, str):
            raw = a2b_hex(raw)
        if len(raw) < HEADER_SIZE:
            raise DecodeError(f"Command too short: {len(raw)} bytes")
        cla, ins, p1, p2, lc = _HEADER.unpack_from(raw)
        return cls(ins=ins, p1=p1, p2=p2, lc=lc, data=bytes(raw[HEADER_SIZE:]), cla=cla)

    def __repr__(self):
        try:
            name = Instruction(self.ins).name
        except ValueError:
            name = '0x%02x' % self.ins
        return '<Command %s p1=%d p2=%d lc=%d data=%s>' % (name, self.p1, self.p2,
                                                           self.lc, B2A(self.data))

def encode_apdu(ins, p1=0, p2=0, data=b'', lc=None):
    # Build command bytes. LC defaults to length of data, but chunked
    # transfers put the total length in the first frame.
    data = bytes(data)
    if lc is None:
        lc = len(data)

    for n, v in [('P1', p1), ('P2', p2), ('INS', ins)]:
        if not (0 <= v <= 0xff):
            raise ValidationError(f"{n} out of range: {v}")
    if not (0 <= lc <= 0xffff_ffff):
        raise ValidationError(f"LC out of range: {lc}")

    return Command(ins=int(ins), p1=p1, p2=p2, lc=lc, data=data).to_bytes()

def split_status(response):
    # Take response (hex string or bytes) and split off the status word.
    # - returns (body bytes, status word)
    if isinstance(response, str):
        if len(response) < CODE_LENGTH:
            raise DecodeError(f"Response too short for status word: {response!r}")
        try:
            response = a2b_hex(response)
        except ValueError:
            raise DecodeError(f"Response is not hex: {response[:16]!r}")

    if len(response) < SW_SIZE:
        raise DecodeError(f"Response too short for status word: {len(response)} bytes")

    sw, = struct.unpack('>H', response[-SW_SIZE:])

    return bytes(response[:-SW_SIZE]), sw

# EOF
