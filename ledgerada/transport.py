# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# transport.py
#
# Desktop to device connection: a real Ledger over USB (via ledgerblue)
# or the emulator over a Unix socket.
#
#
import os, socket
from binascii import a2b_hex
from .utils import B2A
from .constants import *
from .exceptions import TransportError
from .apdu import split_status
from .status import status_error
from .proto import AdaLedger

# Change this to see traffic details
VERBOSE = False

# emulator listens here
EMULATOR_PIPE = '/tmp/ada-ledger-pipe'

def find_devices():
    #
    # Find the emulator, then any Ledger on USB.
    #
    # - generator function.
    #

    # emulation running on a Unix socket
    sim = LedgerUnixTransport.find_simulator()
    if sim:
        yield AdaLedger(sim)

    from ledgerblue.comm import getDongle
    from ledgerblue.commException import CommException

    try:
        dongle = getDongle(VERBOSE)
    except CommException:
        # nothing plugged in
        return

    yield AdaLedger(LedgerDongleTransport(dongle))

def find_first():
    # operate on the first device we can find
    for d in find_devices():
        return d

    return None

class LedgerTransportABC:
    #
    # Abstract base class. Provides exchange() as the protocol code needs it.
    #
    is_emulator = False
    name = 'abstract'

    def _send_recv(self, apdu):
        # take command bytes, return response bytes (with status word at end)
        raise NotImplementedError

    def close(self):
        # release resources
        pass

    def exchange(self, apdu_hex, accepted=(SW_OKAY,)):
        # Send hex-encoded command, return hex-encoded response (status word included)
        # - raises DeviceStatusError if status word is not one of accepted

        apdu = a2b_hex(apdu_hex)

        if VERBOSE:
            print(f">> {apdu_hex}")

        resp = self._send_recv(apdu)

        if VERBOSE:
            print(f"<< {B2A(resp)}")

        _, sw = split_status(resp)
        if sw not in accepted:
            raise status_error(sw)

        return B2A(resp)

class LedgerDongleTransport(LedgerTransportABC):
    #
    # Real Ledger over USB, using a ledgerblue dongle object.
    #
    name = 'USB'

    def __init__(self, dongle, timeout=20000):
        self.dongle = dongle
        self.timeout = timeout

    def close(self):
        self.dongle.close()
        del self.dongle

    def _send_recv(self, apdu):
        from ledgerblue.commException import CommException

        # ledgerblue strips 9000 off good responses and raises for others
        try:
            resp = self.dongle.exchange(apdu, timeout=self.timeout)
        except CommException as exc:
            data = bytes(exc.data or b'')
            return data + exc.sw.to_bytes(SW_SIZE, 'big')
        except OSError as exc:
            raise TransportError(f"USB problem: {exc}") from exc

        return bytes(resp) + SW_OKAY.to_bytes(SW_SIZE, 'big')

class LedgerUnixTransport(LedgerTransportABC):
    #
    # Emulation running over a Unix socket.
    #
    is_emulator = True
    name = 'emulator'

    @classmethod
    def find_simulator(cls, pipename=EMULATOR_PIPE):
        if os.path.exists(pipename):
            return cls(pipename)
        return None

    def __init__(self, pipename):
        self.sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self.sock.connect(pipename)

    def close(self):
        self.sock.close()

    def _send_recv(self, apdu):
        # send and receive response back
        try:
            self.sock.sendall(apdu)
            resp = self.sock.recv(4096)
        except OSError as exc:
            raise TransportError(f"Emulator connection failed: {exc}") from exc

        if not resp:
            # closed socket causes this
            raise TransportError("Emu crashed?")

        return resp

# EOF
