import pytest
from ledgerada.apdu import Command
from ledgerada.constants import SW_OKAY
from ledgerada.status import status_error, extract_status

def pytest_configure(config):
    config.addinivalue_line("markers", "device: needs emulator or real Ledger")

class ScriptedTransport:
    #
    # Stands in for a device: answers from a list of canned responses (hex,
    # status word included) and remembers every command sent.
    #
    name = 'scripted'

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.sent = []

    def exchange(self, apdu_hex, accepted):
        self.sent.append(apdu_hex)
        assert accepted == [SW_OKAY]

        if not self.responses:
            raise AssertionError("unexpected extra command: " + apdu_hex)

        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp

        # what real transports do for bad status
        sw = extract_status(resp)
        if sw not in accepted:
            raise status_error(sw)

        return resp

    @property
    def commands(self):
        return [Command.parse(h) for h in self.sent]

    def close(self):
        pass

@pytest.fixture
def scripted():
    # make a transport with some canned responses
    return ScriptedTransport

@pytest.fixture(scope='session')
def dev():
    # a connected Ledger (via USB) .. or the emulator
    from ledgerada.transport import find_first

    try:
        rv = find_first()
    except ImportError:
        rv = None           # no ledgerblue, so no USB

    if rv is None:
        raise pytest.skip('no device / emulator found')
    return rv

# EOF
