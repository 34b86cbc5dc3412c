#!/usr/bin/env python3
# PYTHON_ARGCOMPLETE_OK
import argparse
import os

import argcomplete
from argcomplete.completers import FilesCompleter, DirectoriesCompleter

from lottery.config_user import UserConfig
from lottery.utils.progress_printer import fail_print, success_print


def parse_config_doc():
    import textwrap
    from typing import get_type_hints
    __ucfg = UserConfig()

    docs = {}
    for name, prop in vars(UserConfig).items():
        if name.startswith('_') or not isinstance(prop, property):
            continue
        t = get_type_hints(prop.fget)['return']
        doc = prop.__doc__
        choices = None
        if hasattr(__ucfg, f'_{name}_values'):
            choices = getattr(__ucfg, f'_{name}_values')
        default_val = getattr(__ucfg, name)
        docs[name] = (
            f"type: {t}\n\n"
            f"{textwrap.dedent(doc).strip()}\n\n"
            f"Default value: {default_val}", t, default_val, choices)
    return docs


def parse_arguments(argv=None):
    class ShowSuppressedInHelpFormatter(argparse.RawTextHelpFormatter):
        def add_usage(self, usage, actions, groups, prefix=None):
            if usage is not argparse.SUPPRESS:
                actions = [action for action in actions if action.metavar != '<cfg_val>']
                args = usage, actions, groups, prefix
                self._add_item(self._format_usage, args)

    main_parser = argparse.ArgumentParser(prog='lottery')
    config_files = ('json', )

    msg = 'Path to local configuration file (defaults to "config.json" in cwd). ' \
          'This file (if it exists), overrides settings defined in the global configuration.'
    main_parser.add_argument('--config-file', default='config.json', metavar='<config_file>', help=msg).completer = FilesCompleter(config_files)

    # Shared 'config' parser
    config_parser = argparse.ArgumentParser(add_help=False)
    msg = 'These parameters can be used to override settings defined (and documented) in config_user.py'
    cfg_group = config_parser.add_argument_group(title='Configuration Options', description=msg)

    # Expose config_user.py options via command line arguments, they are supported in all parsers
    cfg_docs = parse_config_doc()

    def add_config_args(parser, arg_names):
        for name in arg_names:
            doc, t, defval, choices = cfg_docs[name]

            if t is bool:
                if defval:
                    parser.add_argument(f'--no-{name.replace("_", "-")}', dest=name, help=doc, action='store_false')
                else:
                    parser.add_argument(f'--{name.replace("_", "-")}', dest=name, help=doc, action='store_true')
            elif t is int:
                parser.add_argument(f'--{name.replace("_", "-")}', type=int, dest=name, metavar='<cfg_val>', help=doc)
            else:
                arg = parser.add_argument(f'--{name.replace("_", "-")}', dest=name, metavar='<cfg_val>', help=doc,
                                          choices=choices)
                if name.endswith('dir'):
                    arg.completer = DirectoriesCompleter()
    add_config_args(cfg_group, cfg_docs.keys())

    solc_version_help = 'The harness defaults to solc v0.6.12.\n\n' \
                        'A different compiler of the 0.6 series (e.g. v0.6.8) can be selected via this argument,\n' \
                        'it is installed automatically if necessary.'

    subparsers = main_parser.add_subparsers(title='actions', dest='cmd', required=True)

    # 'compile' parser
    compile_parser = subparsers.add_parser('compile', parents=[config_parser], help='Compile the Lottery contract.', formatter_class=ShowSuppressedInHelpFormatter)
    msg = 'The directory to write Lottery.abi and Lottery.bin to. Default: Current directory'
    compile_parser.add_argument('-o', '--output', default=os.getcwd(), help=msg, metavar='<output_directory>').completer = DirectoriesCompleter()
    compile_parser.add_argument('--solc-version', help=solc_version_help, metavar='<cfg_val>')

    # Shared parsers for contract interaction
    account_parser = argparse.ArgumentParser(add_help=False)
    account_parser.add_argument('--account', help='Sender blockchain address (default: blockchain_default_account)', metavar='<address>')
    account_parser.add_argument('--log', action='store_true', help='enable logging')

    address_parser = argparse.ArgumentParser(add_help=False)
    address_parser.add_argument('address', help='Blockchain address of the deployed Lottery contract', metavar='<address>')

    subparsers.add_parser('deploy', parents=[account_parser, config_parser],
                          help='Deploy a new Lottery contract, the sender becomes its manager.',
                          formatter_class=ShowSuppressedInHelpFormatter)

    enter_parser = subparsers.add_parser('enter', parents=[address_parser, account_parser, config_parser],
                                         help='Enter the lottery.', formatter_class=ShowSuppressedInHelpFormatter)
    enter_parser.add_argument('--value', required=True, metavar='<ether>', help='Entry payment in ether (e.g. 0.02)')

    subparsers.add_parser('players', parents=[address_parser, account_parser, config_parser],
                          help='List the players of the current round.', formatter_class=ShowSuppressedInHelpFormatter)

    subparsers.add_parser('pick-winner', parents=[address_parser, account_parser, config_parser],
                          help='Pay out the pot to a random player (manager only).', formatter_class=ShowSuppressedInHelpFormatter)

    subparsers.add_parser('balance', parents=[address_parser, account_parser, config_parser],
                          help='Show the contract balance in wei.', formatter_class=ShowSuppressedInHelpFormatter)

    # 'scenario' parser
    scenario_parser = subparsers.add_parser('scenario', parents=[config_parser],
                                            help='Run the bundled conformance scenarios on a debug backend.',
                                            formatter_class=ShowSuppressedInHelpFormatter)
    scenario_parser.add_argument('names', nargs='*', metavar='<scenario>', help='Scenarios to run (default: all)')
    scenario_parser.add_argument('--log', action='store_true', help='enable logging')

    # 'shell' parser
    subparsers.add_parser('shell', parents=[config_parser],
                          help='Deploy on a debug backend with dummy accounts and enter an interactive shell.',
                          formatter_class=ShowSuppressedInHelpFormatter)

    # parse
    argcomplete.autocomplete(main_parser, always_complete_options=False)
    a = main_parser.parse_args(argv)
    return a


def main(argv=None):
    # parse arguments
    a = parse_arguments(argv)

    from decimal import InvalidOperation

    from web3 import Web3

    from lottery import my_logging
    from lottery.config import cfg
    from lottery.errors.exceptions import CallRejected
    from lottery.transaction.interface import BlockChainError, IntegrityError
    from lottery.transaction.offchain import LotteryContract

    # Load configuration files
    try:
        cfg.load_configuration_from_disk(a.config_file)
    except Exception as e:
        with fail_print():
            print(f"ERROR: Failed to load configuration files\n{e}")
        exit(42)

    # Support for overriding any user config setting via command line
    # The evaluation order for configuration loading is:
    # Default values in config_user.py -> Site config.json -> user config.json -> local config.json -> cmdline arguments
    # Settings defined at a later stage override setting values defined at an earlier stage
    override_dict = {}
    for name in vars(UserConfig):
        if name[0] != '_' and hasattr(a, name):
            val = getattr(a, name)
            if val is not None:
                if name == 'blockchain_default_account' and val.isdigit():
                    val = int(val)
                override_dict[name] = val
    try:
        cfg.override_defaults(override_dict)
    except ValueError as e:
        with fail_print():
            print(f'ERROR: {e}')
        exit(42)

    # Enable logging
    if getattr(a, 'log', False):
        log_file = my_logging.get_log_file(filename=f'lottery_{a.cmd}', include_timestamp=True, label=None)
        my_logging.prepare_logger(log_file, silent=False)

    if a.cmd == 'compile':
        from lottery.compiler.solidity.compiler import compile_contract
        from lottery.contracts import lottery_sol
        from lottery.utils.helpers import save_to_file
        from lottery.utils.progress_printer import print_step

        # Solc version override
        if a.solc_version is not None:
            try:
                cfg.override_solc(a.solc_version)
            except ValueError as e:
                with fail_print():
                    print(f'Error: {e}')
                exit(10)

        output_dir = os.path.abspath(a.output)
        if not os.path.exists(output_dir):
            os.makedirs(output_dir)
        elif not os.path.isdir(output_dir):
            with fail_print():
                print(f'Error: \'{output_dir}\' is not a directory')
            exit(2)

        import json
        with print_step(f'Compiling {cfg.contract_filename}'):
            cout = compile_contract(lottery_sol, cfg.contract_name)
        print(f'Compiled with solc {cfg.solc_version}')
        save_to_file(output_dir, f'{cfg.contract_name}.abi', json.dumps(cout['abi'], indent=2))
        save_to_file(output_dir, f'{cfg.contract_name}.bin', cout['bin'])
    elif a.cmd == 'scenario':
        from unittest import TestCase
        from lottery.examples.scenarios import all_scenarios

        names = a.names if a.names else [name for name, _ in all_scenarios]
        selected = [(name, s) for name, s in all_scenarios if name in names]
        unknown = set(names) - {name for name, _ in selected}
        if unknown:
            with fail_print():
                print(f'Error: unknown scenario(s) {", ".join(sorted(unknown))}')
            exit(1)

        failed = []
        for name, scenario in selected:
            try:
                scenario.run(TestCase())
            except NotImplementedError as e:
                with fail_print():
                    print(f'Error: scenarios require a debug backend (w3-eth-tester, w3-ganache or simulated)\n{e}')
                exit(1)
            except (AssertionError, BlockChainError, CallRejected) as e:
                failed.append(name)
                with fail_print():
                    print(f'FAIL {name}\n{e}')
            else:
                with success_print():
                    print(f'ok   {name}')
        if failed:
            exit(3)
    elif a.cmd == 'shell':
        import code
        from lottery.transaction.runtime import Runtime
        from lottery.state import ETHER

        try:
            is_debug_backend = Runtime.blockchain().is_debug_backend()
        except BlockChainError as e:
            with fail_print():
                print(f'ERROR: blockchain interaction failed\n{e}')
            exit(12)
        if not is_debug_backend:
            with fail_print():
                print('Error: shell requires a debug backend (w3-eth-tester, w3-ganache or simulated)')
            exit(1)
        manager, *players = LotteryContract.create_dummy_accounts(4)
        lottery = LotteryContract.deploy(user=manager)
        handles = [LotteryContract.connect(lottery.address, user=p) for p in players]
        scope = {
            'lottery': lottery,
            'players': handles,
            'ETHER': ETHER,
            'help': lambda o=None: help(o) if o is not None else LotteryContract.reduced_help(),
        }
        code.interact(banner=f'Lottery deployed at {lottery.address} by {manager}.\n'
                             f'"lottery" is the manager handle, "players" holds handles for {len(handles)} further accounts.',
                      local=scope)
    else:
        # Contract interaction
        try:
            if a.account is not None:
                me = a.account
            else:
                me = LotteryContract.default_address()
                if me is None:
                    with fail_print():
                        print('Error: no --account given and no default account configured')
                    exit(1)

            if a.cmd == 'deploy':
                c = LotteryContract.deploy(user=me)
                print(f'Deployed Lottery at: {c.address}')
            else:
                c = LotteryContract.connect(a.address, user=me)
                if a.cmd == 'enter':
                    c.enter(Web3.to_wei(a.value, 'ether'))
                elif a.cmd == 'players':
                    for p in c.get_players():
                        print(p)
                elif a.cmd == 'pick-winner':
                    c.pick_winner()
                elif a.cmd == 'balance':
                    print(c.balance)
                else:
                    raise NotImplementedError(a.cmd)
        except (ValueError, InvalidOperation) as e:
            with fail_print():
                print(f'ERROR: invalid arguments\n{e}')
            exit(1)
        except CallRejected as e:
            with fail_print():
                print(f'ERROR: call rejected\n{e}')
            exit(3)
        except IntegrityError as e:
            with fail_print():
                print(f'ERROR: failed to connect to contract\n{e}')
            exit(13)
        except BlockChainError as e:
            with fail_print():
                print(f'ERROR: blockchain interaction failed\n{e}')
            exit(12)

    with success_print():
        print("Finished successfully")


if __name__ == '__main__':
    main()
