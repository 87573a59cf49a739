#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# Test encoding helpers from utils.py
#
import pytest
from ledgerada.constants import INDEX_NAN, INDEX_MAX_EXCEEDED
from ledgerada.exceptions import ValidationError
from ledgerada.utils import (parse_hex, check_index, ser_index, join_amount, split_amount,
                             pack_amount, unpack_amount)

@pytest.mark.parametrize('value', [0, 1, 0xffff_ffff, 1 << 32, 0x0037699e3ea6d064, (1 << 64) - 1])
def test_amount_words(value):
    lo, hi = split_amount(value)
    assert join_amount(lo, hi) == value
    assert unpack_amount(pack_amount(value)) == value

@pytest.mark.parametrize('bad', [-1, 1 << 64, '5', 1.0, None, True])
def test_amount_range(bad):
    with pytest.raises(ValidationError):
        split_amount(bad)
    with pytest.raises(ValidationError):
        pack_amount(bad)

def test_amount_layout():
    # low word first, both little endian
    assert pack_amount(0x0000000200000001) == bytes.fromhex('0100000002000000')
    assert unpack_amount(b'\xff' + bytes.fromhex('0100000002000000'), 1) == 0x0000000200000001

def test_parse_hex():
    assert parse_hex('00ff') == b'\x00\xff'
    assert parse_hex('00FF') == b'\x00\xff'
    assert parse_hex(b'\x01') == b'\x01'

    for bad in ['0', 'zz', 'hello']:
        with pytest.raises(ValidationError):
            parse_hex(bad)

    with pytest.raises(ValidationError):
        parse_hex(1234)

def test_check_index():
    assert check_index(0) == 0
    assert check_index(0xF005BA11) == 0xF005BA11
    assert ser_index(0xF005BA11) == bytes.fromhex('f005ba11')

    for bad in ['0x10', 1.5, None, True]:
        with pytest.raises(ValidationError) as err:
            check_index(bad)
        assert err.value.code == INDEX_NAN

    for bad in [0x1_0000_0000, -1]:
        with pytest.raises(ValidationError) as err:
            check_index(bad)
        assert err.value.code == INDEX_MAX_EXCEEDED

# EOF
