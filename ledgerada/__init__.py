#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#

__version__ = '0.1.0'

__all__ = [ 'proto', 'exceptions', 'transport', 'constants', 'utils',
            'apdu', 'chunking', 'decoders', 'status', 'txcbor' ]

# find connected devices (or the emulator)
from ledgerada.transport import find_devices, find_first

# wrapper for the Cardano app, wants a transport
from ledgerada.proto import AdaLedger
