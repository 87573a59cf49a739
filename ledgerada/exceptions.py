#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# Exceptions
#

class LedgerAdaError(RuntimeError):
    def __init__(self, msg, code=None):
        self.code = code
        self.raw_msg = msg
        super().__init__(msg)

class ValidationError(LedgerAdaError, ValueError):
    # bad arguments from caller; nothing was sent to device
    pass

class DeviceStatusError(LedgerAdaError):
    # device answered, but not with 0x9000; code is the status word (or None)
    pass

class DecodeError(LedgerAdaError):
    # response too short/malformed for the instruction's layout
    pass

class TransportError(LedgerAdaError):
    # connection level problem, no status word to look at
    pass

# EOF
