#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# decoders.py
#
# Parse the body (status word already removed) of each instruction's response.
# Short bodies raise DecodeError: never return half-filled results.
#
import struct
from dataclasses import dataclass, field
from typing import List, Optional
from .constants import *
from .exceptions import DecodeError
from .utils import unpack_amount

def _need(body, size, what):
    if len(body) < size:
        raise DecodeError(f"{what}: response too short "
                          f"(got {len(body)} bytes, need {size})")

@dataclass(frozen=True)
class PublicKey:
    public_key: bytes
    chain_code: Optional[bytes] = None
    success: bool = field(default=True, init=False)

@dataclass(frozen=True)
class TxOutput:
    address: str
    amount: int

    @property
    def amount_hex(self):
        # as the JS library showed it: 16 hex digits
        return '%016x' % self.amount

@dataclass(frozen=True)
class TxSummary:
    input_count: int
    output_count: int
    outputs: List[TxOutput]
    success: bool = field(default=True, init=False)

@dataclass(frozen=True)
class Signature:
    digest: bytes
    success: bool = field(default=True, init=False)

@dataclass(frozen=True)
class AppVersion:
    major: int
    minor: int
    patch: int
    success: bool = field(default=True, init=False)

    def __str__(self):
        return f'{self.major}.{self.minor}.{self.patch}'

@dataclass(frozen=True)
class EncodedAddress:
    address: str
    success: bool = field(default=True, init=False)

@dataclass(frozen=True)
class CborOutput:
    index: int
    checksum: int
    amount: int

@dataclass(frozen=True)
class CborDecodeResult:
    input_count: int
    output_count: int
    outputs: List[CborOutput]
    success: bool = field(default=True, init=False)

@dataclass(frozen=True)
class TxHash:
    tx_hash: bytes
    success: bool = field(default=True, init=False)


def decode_public_key(body, with_chain_code=False):
    # [len][key...] and, for the root key, 32 bytes of chain code after
    _need(body, 1, 'public key')
    ln = body[0]
    end = 1 + ln
    _need(body, end + (CHAIN_CODE_SIZE if with_chain_code else 0), 'public key')

    chain_code = body[end:end+CHAIN_CODE_SIZE] if with_chain_code else None

    return PublicKey(public_key=bytes(body[1:end]), chain_code=chain_code)

def decode_tx_summary(body):
    # [inputs][outputs] then per output: 12 chars of address, 8 bytes amount
    _need(body, 2, 'set transaction')
    n_in, n_out = body[0], body[1]
    _need(body, 2 + (n_out * TX_OUTPUT_SIZE), 'set transaction')

    outs = []
    offset = 2
    for _ in range(n_out):
        addr = body[offset:offset+MAX_ADDR_PRINT_LENGTH]
        addr = addr.decode('utf-8', 'replace').rstrip('\x00')
        offset += MAX_ADDR_PRINT_LENGTH

        outs.append(TxOutput(address=addr, amount=unpack_amount(body, offset)))
        offset += AMOUNT_SIZE

    return TxSummary(input_count=n_in, output_count=n_out, outputs=outs)

def decode_signature(body):
    # nothing to parse, but nothing is not a signature either
    _need(body, 1, 'sign transaction')
    return Signature(digest=bytes(body))

def decode_app_info(body):
    _need(body, 3, 'app info')
    return AppVersion(major=body[0], minor=body[1], patch=body[2])

def decode_base58(body):
    _need(body, 1, 'base58 encode')
    ln = body[0]
    _need(body, 1 + ln, 'base58 encode')
    try:
        return EncodedAddress(address=body[1:1+ln].decode('ascii'))
    except UnicodeDecodeError:
        raise DecodeError("base58 encode: address is not ASCII")

def decode_cbor_test(body):
    # [inputs][outputs] then one record per output:
    #   checksum (BE32), pad, amount (LE32 lo, LE32 hi), pad
    # - last record may omit its trailing pad byte
    _need(body, 2, 'cbor decode')
    n_in, n_out = body[0], body[1]
    _need(body, 2 + n_out*CBOR_RECORD_SIZE - 1, 'cbor decode')

    outs = []
    offset = 2
    for _ in range(n_out):
        checksum, = struct.unpack_from('>I', body, offset)
        offset += CBOR_CHECKSUM_SIZE + 1
        amount = unpack_amount(body, offset)
        offset += AMOUNT_SIZE + 1

        outs.append(CborOutput(index=len(outs), checksum=checksum, amount=amount))

    return CborDecodeResult(input_count=n_in, output_count=n_out, outputs=outs)

def decode_hash_test(body):
    # first two bytes are reserved
    _need(body, HASH_TEST_OFFSET + HASH_TEST_SIZE, 'hash test')
    return TxHash(tx_hash=bytes(body[HASH_TEST_OFFSET:HASH_TEST_OFFSET+HASH_TEST_SIZE]))

# EOF
