#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# status.py
#
# Turn status words (or error messages that end in one) into typed errors.
#
import re
from .constants import *
from .exceptions import DeviceStatusError

# status word is last 4 hex digits of a line
_SW_PATTERN = re.compile(r'([0-9A-F]{4})$', re.MULTILINE)

def extract_status(text):
    # find the status word at end of a response or error message
    # - returns int or None if nothing looks like one
    if isinstance(text, (bytes, bytearray)):
        text = text.decode('ascii', 'replace')

    found = _SW_PATTERN.findall(str(text).upper())
    if not found:
        return None

    code = int(found[0], 16)

    # all zeros is never a real status word
    return code or None

def describe_status(code):
    if code is None:
        return "Unknown Error"
    return STATUS_MESSAGES.get(code, "Invalid Status")

def status_error(code):
    # build the exception for a non-success status word
    msg = describe_status(code)
    if code is not None:
        msg = '0x%04X: %s' % (code, msg)
    return DeviceStatusError(msg, code)

def classify_error(err):
    # Look at any error (or text of one) and classify by the status word
    # it ends with. Useful for errors raised by other transport libraries.
    if isinstance(err, DeviceStatusError):
        return err

    sw = getattr(err, 'sw', None)
    if sw is None:
        sw = extract_status(err)

    return status_error(sw)

def is_success(response):
    # True if response (hex or bytes) ends in 9000
    if isinstance(response, (bytes, bytearray)):
        return len(response) >= SW_SIZE and response[-SW_SIZE:] == b'\x90\x00'
    return len(response) >= CODE_LENGTH and response[-CODE_LENGTH:] == '9000'

# EOF
