#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# System constants. Opcodes and layouts must match the firmware (main.c).
#
from enum import IntEnum

# APDU class byte for every command we send
CLA = 0x80

class Instruction(IntEnum):
    GET_PUBLIC_KEY = 0x01
    SET_TX = 0x02
    SIGN_TX = 0x03
    APP_INFO = 0x04
    BLAKE2B_TEST = 0x07
    BASE58_ENCODE_TEST = 0x08
    CBOR_DECODE_TEST = 0x09

# only present in test builds of the firmware; expect SW_INS_NOT_AVAILABLE otherwise
TEST_INSTRUCTIONS = frozenset({ Instruction.BLAKE2B_TEST,
                                Instruction.BASE58_ENCODE_TEST,
                                Instruction.CBOR_DECODE_TEST })

# Header: CLA, INS, P1, P2, then 4-byte big-endian length (LC)
OFFSET_LC = 4
OFFSET_CDATA = 8
HEADER_SIZE = OFFSET_CDATA

# whole frame, header included
MAX_APDU_SIZE = 64
MAX_CHUNK_SIZE = MAX_APDU_SIZE - HEADER_SIZE

# P1/P2 for chunked transfers
P1_FIRST = 0x01
P1_NEXT = 0x02
P2_SINGLE = 0x01
P2_MULTI = 0x02

# P1 for GET_PUBLIC_KEY
P1_ROOT_KEY = 0x01
P1_KEY_INDEX = 0x02

# status word trailer on every response: 2 bytes, 4 hex digits
SW_SIZE = 2
CODE_LENGTH = SW_SIZE * 2

# Correct ADPU response from all commands: 90 00
SW_OKAY = 0x9000
SW_APP_NOT_RUNNING = 0x6E00
SW_INS_NOT_AVAILABLE = 0x6D00

# size limits, checked before anything is sent
MAX_TX_HEX_LENGTH = 2048
MAX_TX_SIZE = MAX_TX_HEX_LENGTH // 2
MAX_MSG_LENGTH = 248
MAX_INDEX = 0xFFFF_FFFF

# response layouts
MAX_ADDR_PRINT_LENGTH = 12
AMOUNT_SIZE = 8
TX_OUTPUT_SIZE = MAX_ADDR_PRINT_LENGTH + AMOUNT_SIZE
CHAIN_CODE_SIZE = 32
HASH_TEST_OFFSET = 2
HASH_TEST_SIZE = 64

# CBOR decode test record: checksum (BE32), pad, amount (2x LE32), pad
CBOR_CHECKSUM_SIZE = 4
CBOR_RECORD_SIZE = CBOR_CHECKSUM_SIZE + 1 + AMOUNT_SIZE + 1

# Error codes for problems caught on our side
MAX_TX_HEX_LENGTH_EXCEEDED = 5001
MAX_MSG_LENGTH_EXCEEDED = 5002
INDEX_NAN = 5003
INDEX_MAX_EXCEEDED = 5302

# human text for known status words
STATUS_MESSAGES = {
    SW_APP_NOT_RUNNING: "Cardano App is not installed or not running on the Ledger.",
    SW_INS_NOT_AVAILABLE: "Instruction not available on this build.",
}

# EOF
