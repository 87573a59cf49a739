#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# proto.py
#
# Implement the higher-level protocol for the Cardano (ADA) app on a Ledger.
#
# All device traffic is strictly one command at a time: each exchange
# finishes before the next starts, and the first error stops the sequence.
#
from typing import List
from .utils import *
from .constants import *
from .apdu import encode_apdu, split_status
from .chunking import send_chunked
from .status import status_error
from .exceptions import ValidationError
from .decoders import (decode_public_key, decode_tx_summary, decode_signature,
                       decode_app_info, decode_base58, decode_cbor_test, decode_hash_test)

class AdaLedger:
    #
    # Protocol wrapper. Call methods on this instance to get work done.
    # - transport needs only: exchange(apdu_hex, accepted) -> response_hex
    #
    def __init__(self, transport):
        self.tr = transport

    def __repr__(self):
        return '<%s via %s>' % (self.__class__.__name__, getattr(self.tr, 'name', '?'))

    def close(self):
        # optional? cleanup connection
        self.tr.close()
        del self.tr

    def send(self, ins, p1=0, p2=0, data=b'', lc=None):
        # Send one command, return body of response (status word removed)
        apdu = encode_apdu(ins, p1, p2, data, lc=lc)

        resp = self.tr.exchange(B2A(apdu), [SW_OKAY])

        body, sw = split_status(resp)
        if sw != SW_OKAY:
            raise status_error(sw)

        return body

    def send_chunked(self, ins, payload):
        # Send a payload that might need many frames; return last response's body
        return send_chunked(self.tr.exchange, ins, payload)

    #
    # Operations
    #
    def get_public_key(self, index: int):
        # Public key at 44'/1815'/0'/[index]
        # - device refuses non-hardened index (< 0x80000000)
        body = self.send(Instruction.GET_PUBLIC_KEY, P1_KEY_INDEX, 0, ser_index(index))
        return decode_public_key(body)

    def get_root_public_key(self):
        # Root extended public key of wallet, M/44'/1815'
        # AKA. "wallet recovery passphrase": pubkey plus 32 bytes of chain code
        body = self.send(Instruction.GET_PUBLIC_KEY, P1_ROOT_KEY, 0)
        return decode_public_key(body, with_chain_code=True)

    get_wallet_recovery_passphrase = get_root_public_key

    def set_transaction(self, tx):
        # Load the transaction into device, maybe over many frames.
        # - returns TxSummary from the last frame, or None if device sent just an ack
        raw = parse_hex(tx)

        if len(raw) > MAX_TX_SIZE:
            raise ValidationError("Transaction is too large. Must be less than "
                                  f"{MAX_TX_SIZE} bytes.", MAX_TX_HEX_LENGTH_EXCEEDED)

        body = self.send_chunked(Instruction.SET_TX, raw)
        if not body:
            return None

        return decode_tx_summary(body)

    def sign_transaction_with_indexes(self, indexes: List[int]):
        # Sign the already-set transaction with key at each index, in order.
        # - set_transaction() must be done first
        # - one Signature per index
        cmds = [ser_index(i) for i in indexes]

        return [decode_signature(self.send(Instruction.SIGN_TX, 0, 0, data))
                    for data in cmds]

    def sign_transaction(self, tx, indexes: List[int]):
        # Set and sign transaction. Device hashes it (Blake2b) and signs
        # with private key at 44'/1815'/0'/[index] for each index.
        # - check indexes before sending anything at all
        for i in indexes:
            check_index(i)

        self.set_transaction(tx)

        return self.sign_transaction_with_indexes(indexes)

    def get_app_info(self):
        # Version of Cardano app; also a good "is it connected?" test
        return decode_app_info(self.send(Instruction.APP_INFO))

    #
    # Test-build only instructions; production firmware says 0x6D00
    #
    def test_base58_encode(self, data):
        raw = parse_hex(data, 'address')

        if len(raw) > MAX_MSG_LENGTH:
            raise ValidationError("Address is too large. Must be less than "
                                  f"{MAX_MSG_LENGTH} bytes.", MAX_MSG_LENGTH_EXCEEDED)

        return decode_base58(self.send(Instruction.BASE58_ENCODE_TEST, 0, 0, raw))

    def test_cbor_decode(self, tx):
        body = self.send_chunked(Instruction.CBOR_DECODE_TEST, parse_hex(tx))
        return decode_cbor_test(body)

    def test_hash_transaction(self, tx):
        body = self.send_chunked(Instruction.BLAKE2B_TEST, parse_hex(tx))
        return decode_hash_test(body)

# EOF
