"""
This module defines the lottery harness options which are configurable by the user via command line arguments.

The argument parser in :py:mod:`.__main__` uses the docstrings, type hints and _values for the help
 strings and the _values fields for autocompletion

WARNING: This module is imported before argcomplete.autocomplete is called. \
It should thus not have any import side-effects or perform any expensive operations during import.
"""
from typing import Any, Union

from appdirs import AppDirs


def _check_is_one_of(val: str, legal_vals):
    if val not in legal_vals:
        raise ValueError(f'Invalid config value {val}, must be one of {legal_vals}')


def _type_check(val: Any, t):
    if not isinstance(val, t):
        raise ValueError(f'Value {val} has wrong type (expected {t})')


class UserConfig:
    def __init__(self):
        self._appdirs = AppDirs('lottery', appauthor=False, version=None, roaming=True)

        # User configuration
        # Each attribute must have a type hint and a docstring for correct help strings in the commandline interface.
        # If 'Available Options: [...]' is specified, the options are used for autocomplete suggestions.

        self._blockchain_backend: str = 'w3-eth-tester'
        self._blockchain_backend_values = ['w3-eth-tester', 'w3-ganache', 'w3-ipc', 'w3-websocket', 'w3-http', 'w3-custom', 'simulated']

        self._blockchain_node_uri: Union[Any, str, None] = 'http://localhost:7545'
        self._blockchain_default_account: Union[int, str, None] = 0
        self._blockchain_gas_limit: int = 1000000

        self._opt_solc_optimizer_runs: int = 200

        self._data_dir: str = self._appdirs.user_data_dir
        self._log_dir: str = self._appdirs.user_log_dir
        self._verbosity: int = 1

    @property
    def blockchain_backend(self) -> str:
        """
        Backend to use when interacting with the blockchain.

        w3-eth-tester and w3-ganache provide pre-funded dummy accounts and are needed for running the scenarios.
        simulated runs the lottery state machine in-process without any chain or compiler.
        See https://web3py.readthedocs.io/en/stable/providers.html for more information.

        Available Options: [w3-eth-tester, w3-ganache, w3-ipc, w3-websocket, w3-http, w3-custom, simulated]
        """
        return self._blockchain_backend

    @blockchain_backend.setter
    def blockchain_backend(self, val: str):
        _check_is_one_of(val, self._blockchain_backend_values)
        self._blockchain_backend = val

    @property
    def blockchain_node_uri(self) -> Union[Any, str, None]:
        """
        Backend specific location of the ethereum node
        w3-eth-tester : unused
        w3-ganache    : url
        w3-ipc        : path to ipc socket file
        w3-websocket  : web socket uri
        w3-http       : url
        w3-custom     : web3 instance, must not be None
        simulated     : unused
        """
        return self._blockchain_node_uri

    @blockchain_node_uri.setter
    def blockchain_node_uri(self, val: Union[Any, str, None]):
        self._blockchain_node_uri = val

    @property
    def blockchain_default_account(self) -> Union[int, str, None]:
        """
        Address of the wallet which is used when no sender is specified explicitly.

        If None -> must always specify a sender
        If int -> use eth.accounts[int]
        If str -> use address str
        """
        return self._blockchain_default_account

    @blockchain_default_account.setter
    def blockchain_default_account(self, val: Union[int, str, None]):
        _type_check(val, (int, str, type(None)))
        self._blockchain_default_account = val

    @property
    def blockchain_gas_limit(self) -> int:
        """Gas limit attached to every transaction issued by the harness."""
        return self._blockchain_gas_limit

    @blockchain_gas_limit.setter
    def blockchain_gas_limit(self, val: int):
        _type_check(val, int)
        if val <= 0:
            raise ValueError(f'Gas limit must be positive, was {val}')
        self._blockchain_gas_limit = val

    @property
    def opt_solc_optimizer_runs(self) -> int:
        """SOLC: optimize for how many times to run the code, a negative value disables the optimizer"""
        return self._opt_solc_optimizer_runs

    @opt_solc_optimizer_runs.setter
    def opt_solc_optimizer_runs(self, val: int):
        _type_check(val, int)
        self._opt_solc_optimizer_runs = val

    @property
    def data_dir(self) -> str:
        """Path to directory where to store user data (e.g. compiled contract artifacts)."""
        return self._data_dir

    @data_dir.setter
    def data_dir(self, val: str):
        _type_check(val, str)
        import os
        if not os.path.exists(val):
            os.makedirs(val)
        self._data_dir = val

    @property
    def log_dir(self) -> str:
        """Path to default log directory."""
        return self._log_dir

    @log_dir.setter
    def log_dir(self, val: str):
        _type_check(val, str)
        import os
        if not os.path.exists(val):
            os.makedirs(val)
        self._log_dir = val

    @property
    def verbosity(self) -> int:
        """
        If 0, no output
        If 1, normal output
        If 2, verbose output

        This includes for example the arguments and return values of every contract call.
        """
        return self._verbosity

    @verbosity.setter
    def verbosity(self, val: int):
        _type_check(val, int)
        self._verbosity = val
