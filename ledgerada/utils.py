# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
import struct
from binascii import b2a_hex, a2b_hex, Error as BinasciiError
from .constants import *
from .exceptions import ValidationError

# show bytes as hex in a string
B2A = lambda x: b2a_hex(x).decode('ascii')

def parse_hex(value, what='transaction'):
    # accept hex string (what the JS world uses) or raw bytes
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)

    if not isinstance(value, str):
        raise ValidationError(f"Expected hex string for {what}, got {type(value).__name__}")

    try:
        return a2b_hex(value.strip())
    except (BinasciiError, ValueError):
        raise ValidationError(f"Unparsable hex for {what}: {value[:16]!r}...")

def check_index(index):
    # derivation index must be an integer that fits in 32 bits (unsigned)
    if isinstance(index, bool) or not isinstance(index, int):
        raise ValidationError("Address index is not a number.", INDEX_NAN)

    if not (0 <= index <= MAX_INDEX):
        raise ValidationError("Address index exceeds maximum.", INDEX_MAX_EXCEEDED)

    return index

def ser_index(index):
    # 4-byte payload for GET_PUBLIC_KEY and SIGN_TX
    return struct.pack('>I', check_index(index))

# Amounts are two LE32 words: low word first, then high word at +4
def join_amount(lo, hi):
    return ((hi & 0xffff_ffff) << 32) | (lo & 0xffff_ffff)

def split_amount(value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Amount is not a number: {value!r}")
    if not (0 <= value < (1 << 64)):
        raise ValidationError(f"Amount does not fit in 64 bits: {value}")

    return value & 0xffff_ffff, value >> 32

def unpack_amount(buf, offset=0):
    lo, hi = struct.unpack_from('<II', buf, offset)
    return join_amount(lo, hi)

def pack_amount(value):
    return struct.pack('<II', *split_amount(value))

# EOF
