#!/usr/bin/env python
#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# To use this, install with:
#
#   pip install --editable '.[cli]'
#
# That will create the command "adaledger" in your path.
#
#
import click, sys
from ledgerada.utils import B2A
from ledgerada.exceptions import LedgerAdaError, ValidationError
from ledgerada.transport import find_first
from ledgerada.txcbor import check_tx_summary
from ledgerada import __version__

# dict of options that apply to all commands
global global_opts
global_opts = dict()

# Cleanup display (supress traceback) for user-feedback exceptions
_sys_excepthook = sys.excepthook
def my_hook(ty, val, tb):
    if issubclass(ty, (LedgerAdaError, RuntimeError)):
        print("FATAL: %s" % val, file=sys.stderr)
    else:
        return _sys_excepthook(ty, val, tb)
sys.excepthook=my_hook

def fail(msg):
    # show message and stop
    click.echo(f"FAILURE: {msg}", err=True)
    sys.exit(1)

def get_device():
    # Pick a device to work with
    global global_opts

    if global_opts.get('verbose', False):
        import ledgerada.transport as tt
        tt.VERBOSE = True

    dev = find_first()
    if not dev:
        fail("No Ledger found. Is it plugged in, unlocked, with Cardano app open?")

    return dev

def parse_index(ctx, param, value):
    # accept 0x-prefixed or decimal numbers
    try:
        if isinstance(value, str):
            return int(value, 0)
        return [int(v, 0) for v in value]
    except ValueError as exc:
        raise click.BadParameter(str(exc))

# Accept any prefix of a command name.
#
# from <https://click.palletsprojects.com/en/8.0.x/advanced/?#command-aliases>
class AliasedGroup(click.Group):
    def get_command(self, ctx, cmd_name):
        rv = click.Group.get_command(self, ctx, cmd_name)
        if rv is not None:
            return rv
        matches = [x for x in self.list_commands(ctx)
                   if x.startswith(cmd_name)]
        if not matches:
            return None
        elif len(matches) == 1:
            return click.Group.get_command(self, ctx, matches[0])
        ctx.fail(f"Abiguous command. Pick one of: {' | '.join(sorted(matches))}")

    def resolve_command(self, ctx, args):
        # always return the full command name
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name, cmd, args


#
# Options we want for all commands
#
@click.group(cls=AliasedGroup)
@click.option('--verbose', '-v', is_flag=True,
                    help="Show traffic with device.")
@click.option('--pdb', is_flag=True,
                    help="Prepare patient for surgery to remove bugs.")
@click.version_option(version=__version__)
def main(**kws):
    '''
    Talk to the Cardano (ADA) app on a Ledger, or its emulator.

    Commands marked [TEST] only work on test builds of the app.
    You can use "pub", or "p" for "pubkey": any distinct prefix for all commands.
    '''
    # implement PDB option here
    if kws.pop('pdb', False):
        import pdb
        def doit(ex_cls, ex, tb):
            pdb.pm()
        sys.excepthook = doit

    # global options, mostly not considered here
    global global_opts
    global_opts.update(kws)

@main.command('version')
def get_version():
    "Get the version of the Cardano app running on the device"
    dev = get_device()
    click.echo(str(dev.get_app_info()))

@main.command('pubkey')
@click.argument('index', type=str, callback=parse_index)
def get_pubkey(index):
    "Show public key at 44'/1815'/0'/INDEX (hardened, ie. >= 0x80000000)"
    dev = get_device()
    click.echo(B2A(dev.get_public_key(index).public_key))

@main.command('root')
def get_root():
    "Show root public key and chain code (wallet recovery passphrase)"
    dev = get_device()
    pk = dev.get_root_public_key()
    click.echo(f'public_key: {B2A(pk.public_key)}')
    click.echo(f'chain_code: {B2A(pk.chain_code)}')

def show_summary(summary):
    if summary is None:
        click.echo("Device gave no summary.")
        return

    click.echo(f'inputs: {summary.input_count}')
    click.echo(f'outputs: {summary.output_count}')
    for n, o in enumerate(summary.outputs):
        click.echo(f'  #{n}: {o.address}... amount={o.amount:,} (0x{o.amount_hex})')

@main.command('settx')
@click.argument('tx', type=str)
@click.option('--no-check', is_flag=True, help="Skip comparing device's view to our own decode")
def set_tx(tx, no_check):
    "Load a transaction (hex) into the device and show what it parsed"
    dev = get_device()
    summary = dev.set_transaction(tx)
    show_summary(summary)

    if summary and not no_check:
        try:
            check_tx_summary(tx, summary)
        except ValidationError as exc:
            fail(f"Cannot decode transaction: {exc}")
        except ValueError as exc:
            fail(f"Device disagrees with transaction: {exc}")
        click.echo("Matches transaction.")

@main.command('sign')
@click.argument('tx', type=str)
@click.argument('indexes', nargs=-1, required=True, callback=parse_index)
def sign_tx(tx, indexes):
    "Sign transaction (hex) with the key at each INDEX, in order"
    dev = get_device()
    for idx, sig in zip(indexes, dev.sign_transaction(tx, indexes)):
        click.echo('0x%08x: %s' % (idx, B2A(sig.digest)))

@main.command('b58')
@click.argument('data', type=str)
def test_base58(data):
    "[TEST] Have the device base58 encode some bytes (hex)"
    dev = get_device()
    click.echo(dev.test_base58_encode(data).address)

@main.command('cbor')
@click.argument('tx', type=str)
def test_cbor(tx):
    "[TEST] Have the device decode a transaction's CBOR"
    dev = get_device()
    rv = dev.test_cbor_decode(tx)
    click.echo(f'inputs: {rv.input_count}')
    click.echo(f'outputs: {rv.output_count}')
    for o in rv.outputs:
        click.echo(f'  #{o.index}: checksum=0x{o.checksum:08x} amount={o.amount:,}')

@main.command('hash')
@click.argument('tx', type=str)
def test_hash(tx):
    "[TEST] Have the device hash a transaction"
    dev = get_device()
    click.echo(B2A(dev.test_hash_transaction(tx).tx_hash))

if __name__ == '__main__':
    main()

# EOF
