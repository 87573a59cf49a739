#!/usr/bin/env python3
#
# (c) Copyright 2022 by Coinkite Inc. All rights reserved.
#
# Emulate the Cardano (ADA) app on a Ledger, well enough to test the protocol.
# Keys and signatures are fake (but repeatable), nothing here is real crypto.
#
import os, struct, click, random, traceback
from hashlib import blake2b, sha256
from dataclasses import dataclass
import base58

from ledgerada.constants import *
from ledgerada.apdu import Command
from ledgerada.exceptions import LedgerAdaError
from ledgerada.txcbor import parse_tx, render_address
from ledgerada.utils import B2A, pack_amount

# Print more?
DEBUG = True

# Reported by APP_INFO
APP_VERSION = (1, 0, 3)

# Status words only the device side uses
SW_WRONG_LENGTH = 0x6700
SW_BAD_STATE = 0x6985
SW_BAD_DATA = 0x6A80
SW_BAD_P1P2 = 0x6B00
SW_KEY_NOT_HARDENED = 0x5201
SW_SIGN_NOT_HARDENED = 0x5301
SW_INTERNAL = 0x6F00

HARDENED = 0x8000_0000

# provides msg+status word
class EmuStatus(RuntimeError):
    def __init__(self, msg, sw):
        self.sw = sw
        super().__init__(msg)

def prandom(count):
    # make some bytes, randomly, but not: fully deterministic
    return bytes(random.randint(0, 255) for i in range(count))

@dataclass
class Receiver:
    '''
        Payload being reassembled from chunks
    '''
    ins: int
    total: int
    buf: bytes = b''

    @property
    def done(self):
        return len(self.buf) == self.total

@dataclass
class AppState:
    '''
        Whole-app state
    '''
    seed: bytes
    test_build: bool = False
    rx: (Receiver, None) = None
    tx: (bytes, None) = None

    def __init__(self, test_build=False):
        self.seed = prandom(32)
        self.test_build = test_build
        self.rx = None
        self.tx = None

    def __repr__(self):
        kind = 'TEST BUILD' if self.test_build else 'production'
        return f'<ADA APP: v%d.%d.%d {kind} seed={B2A(self.seed[0:4])}...>' % APP_VERSION

    def _pubkey(self, index):
        return sha256(self.seed + struct.pack('>I', index)).digest()

    def _receive(self, cmd):
        # Collect chunks. Returns full payload once all here, else None.
        if cmd.p1 == P1_FIRST:
            if cmd.p2 not in (P2_SINGLE, P2_MULTI):
                raise EmuStatus('bad P2', SW_BAD_P1P2)
            if len(cmd.data) > cmd.lc:
                raise EmuStatus('more data than total', SW_WRONG_LENGTH)
            if cmd.p2 == P2_SINGLE and len(cmd.data) != cmd.lc:
                raise EmuStatus('single frame must be complete', SW_WRONG_LENGTH)
            self.rx = Receiver(ins=cmd.ins, total=cmd.lc, buf=cmd.data)

        elif cmd.p1 == P1_NEXT:
            rx = self.rx
            if not rx or rx.ins != cmd.ins or cmd.p2 != P2_MULTI:
                self.rx = None
                raise EmuStatus('continuation without start', SW_BAD_STATE)
            if cmd.lc != len(cmd.data) or len(rx.buf) + cmd.lc > rx.total:
                self.rx = None
                raise EmuStatus('chunk length wrong', SW_WRONG_LENGTH)
            rx.buf += cmd.data

        else:
            raise EmuStatus('bad P1', SW_BAD_P1P2)

        if not self.rx.done:
            return None

        rv, self.rx = self.rx.buf, None
        return rv

    #
    # Commands, by instruction
    #

    def cmd_get_public_key(self, cmd):
        if cmd.p1 == P1_ROOT_KEY:
            pk = self._pubkey(0)
            chain_code = sha256(b'chain' + self.seed).digest()
            return bytes([len(pk)]) + pk + chain_code

        if cmd.p1 != P1_KEY_INDEX:
            raise EmuStatus('bad P1', SW_BAD_P1P2)
        if cmd.lc != 4 or len(cmd.data) != 4:
            raise EmuStatus('need index', SW_WRONG_LENGTH)

        index, = struct.unpack('>I', cmd.data)
        if index < HARDENED:
            raise EmuStatus('index not hardened', SW_KEY_NOT_HARDENED)

        pk = self._pubkey(index)
        return bytes([len(pk)]) + pk

    def cmd_set_tx(self, cmd):
        raw = self._receive(cmd)
        if raw is None:
            return b''

        try:
            info = parse_tx(raw)
        except LedgerAdaError as exc:
            raise EmuStatus(str(exc), SW_BAD_DATA)

        rv = bytes([len(info.inputs), len(info.outputs)])
        for o in info.outputs:
            addr = render_address(o.address)[0:MAX_ADDR_PRINT_LENGTH]
            rv += addr.encode('ascii').ljust(MAX_ADDR_PRINT_LENGTH, b'\0')
            rv += pack_amount(o.amount)

        self.tx = raw
        return rv

    def cmd_sign_tx(self, cmd):
        if not self.tx:
            raise EmuStatus('no transaction set', SW_BAD_STATE)
        if len(cmd.data) != 4:
            raise EmuStatus('need index', SW_WRONG_LENGTH)

        index, = struct.unpack('>I', cmd.data)
        if index < HARDENED:
            raise EmuStatus('index not hardened', SW_SIGN_NOT_HARDENED)

        md = blake2b(self.tx, digest_size=32).digest()
        return blake2b(md, key=self._pubkey(index)).digest()

    def cmd_app_info(self, cmd):
        return bytes(APP_VERSION)

    def cmd_blake2b_test(self, cmd):
        raw = self._receive(cmd)
        if raw is None:
            return b''
        return bytes(HASH_TEST_OFFSET) + blake2b(raw).digest()

    def cmd_base58_encode_test(self, cmd):
        if len(cmd.data) > MAX_MSG_LENGTH:
            raise EmuStatus('too long', SW_WRONG_LENGTH)
        enc = base58.b58encode(cmd.data)
        return bytes([len(enc)]) + enc

    def cmd_cbor_decode_test(self, cmd):
        raw = self._receive(cmd)
        if raw is None:
            return b''

        try:
            info = parse_tx(raw)
        except LedgerAdaError as exc:
            raise EmuStatus(str(exc), SW_BAD_DATA)

        rv = bytes([len(info.inputs), len(info.outputs)])
        for o in info.outputs:
            rv += struct.pack('>I', o.checksum) + b'\0' + pack_amount(o.amount) + b'\0'

        return rv

    def process(self, apdu):
        # handle one command; returns full response (with status word)
        try:
            cmd = Command.parse(apdu)

            if cmd.cla != CLA:
                raise EmuStatus('wrong CLA', SW_APP_NOT_RUNNING)

            try:
                ins = Instruction(cmd.ins)
            except ValueError:
                raise EmuStatus('unknown INS', SW_INS_NOT_AVAILABLE)

            if ins in TEST_INSTRUCTIONS and not self.test_build:
                raise EmuStatus('not in this build', SW_INS_NOT_AVAILABLE)

            # lookup command
            method = getattr(self, 'cmd_' + ins.name.lower())
            body, sw = method(cmd), SW_OKAY

        except EmuStatus as exc:
            if DEBUG:
                print(f"  error: {exc}")
            body, sw = b'', exc.sw
        except LedgerAdaError as exc:
            # too short to parse
            if DEBUG:
                print(f"  error: {exc}")
            body, sw = b'', SW_WRONG_LENGTH
        except BaseException as exc:
            # shouldn't happen
            print(f"FAILED: Command {B2A(apdu)} => {exc}")
            traceback.print_exc()
            body, sw = b'', SW_INTERNAL

        return body + struct.pack('>H', sw)

    def emulate(self, pipename):
        # Using a unix socket as connector, run as an emulator for the device.
        import atexit, socket

        # manage unix socket cleanup for client
        def sock_cleanup():
            if os.path.exists(pipename):
                os.unlink(pipename)
        sock_cleanup()
        atexit.register(sock_cleanup)

        pipe = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)

        pipe.bind(pipename)
        pipe.listen()
        while 1:
            print(f"Waiting for new connection on: {pipename}")
            con, addr = pipe.accept()

            print(f"Connected.")

            while 1:
                msg = con.recv(4096)
                if not msg: break

                if DEBUG:
                    print(f">> {B2A(msg)}")

                resp = self.process(msg)

                if DEBUG:
                    print(f"<< {B2A(resp)}")

                con.sendall(resp)

            con.close()

# Options we want for all commands
@click.group()
@click.option('--quiet', '-q', is_flag=True, help='Less debugging')
@click.option('--rng-seed', '-r', type=int, default=42, help='Seed value for (not) RNG', metavar="integer")
def main(rng_seed, quiet=False):
    global DEBUG
    DEBUG = not quiet

    random.seed(rng_seed)


@main.command('emulate')
@click.option('--test-build', '-t', is_flag=True, help='Support the test-only instructions')
@click.option('--pipe', '-p', type=str, default='/tmp/ada-ledger-pipe', help='Unix pipe for comms', metavar="PATH")
def emulate_app(pipe, test_build=False):
    '''
        Emulate the Cardano app, already open on an unlocked Ledger.
    '''
    app = AppState(test_build=test_build)

    print(app)

    app.emulate(pipe)

if __name__ == '__main__':
    main()

# EOF
