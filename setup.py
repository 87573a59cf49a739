#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
#
# Cardano (ADA) Ledger app protocol and python support library
#

from ledgerada import __version__

# To use this command to install and yet be able to edit the code (here). Great for dev:
#
#   pip install --editable .
#
# with cli dependencies
#
#   pip install --editable '.[cli]'
#
# with test dependencies
#
#   pip install --editable '.[test]'
#
# to talk to a real Ledger over USB
#
#   pip install --editable '.[device]'
#
#
from setuptools import setup

# these minimum versions are tested, some earlier values would probably work too.
requirements = [
    'cbor2>=5.4.1',
    'base58>=2.1.0',
]

device_requirements = [
    'ledgerblue>=0.1.41',
]

cli_requirements = [
    'click>=8.0.3',
]

# for emulator/ada_emu.py
emulator_requirements = [
    'click>=8.0.3',
]

test_requirements = [
    'pytest',
    'click>=8.0.3',
]

with open("README.md", "r") as fh:
    long_description = fh.read()

setup(
    name='ada-ledger-protocol',
    version=__version__,
    packages=[ 'ledgerada' ],
    python_requires='>3.6.0',
    install_requires=requirements,
    extras_require={
        'cli': cli_requirements,
        'device': device_requirements,
        'emulator': emulator_requirements,
        'test': test_requirements,
    },
    author='Coinkite Inc.',
    author_email='support@coinkite.com',
    description="Drive the Cardano (ADA) app on a Ledger using Python",
    long_description=long_description,
    long_description_content_type="text/markdown",
    entry_points='''
        [console_scripts]
        adaledger=ledgerada.cli:main
    ''',
    classifiers=[
        'Operating System :: POSIX :: Linux',
        'Operating System :: Microsoft :: Windows',
        'Operating System :: MacOS :: MacOS X',
    ],
)
