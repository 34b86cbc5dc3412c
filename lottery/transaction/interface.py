"""
This module defines the blockchain API, an abstraction layer which is used by the LotteryContract handles.

It provides high level functions for deployment, connection, read calls and transaction issuing. Concrete backends
(web3-based or in-process simulation) implement the protected methods.
"""

from abc import ABCMeta, abstractmethod
from typing import Tuple, List, Optional, Union, Any

from lottery.config import lt_print, lt_print_banner
from lottery.errors.exceptions import CallRejected
from lottery.transaction.types import AddressValue, Value


class IntegrityError(Exception):
    """Exception which is raised when a deployed contract does not match the local contract file."""
    pass


class BlockChainError(Exception):
    """
    Exception which is raised when a blockchain interaction fails for any reason.
    """
    pass


class TransactionFailedException(BlockChainError, CallRejected):
    """Exception which is raised when a transaction reverted without a known reason."""
    pass


class LotteryBlockchainInterface(metaclass=ABCMeta):
    """
    API to interact with the blockchain.

    For safety reasons, connecting to an existing contract verifies the integrity of the remote contract by comparing \
    its code with the result of locally compiling Lottery.sol (for backends where this is meaningful).
    """

    @classmethod
    def is_debug_backend(cls) -> bool:
        return False

    # PUBLIC API

    @property
    def default_address(self) -> Optional[AddressValue]:
        """Return wallet address to use as from address when no address is explicitly specified."""
        addr = self._default_address()
        return None if addr is None else AddressValue(addr)

    def create_test_accounts(self, count: int) -> Tuple:
        """
        Return addresses of pre-funded accounts (only implemented for debug backends).

        :param count: how many accounts
        :raise NotImplementedError: if the backend does not support dummy accounts
        :raise ValueError: if not enough unused pre-funded accounts are available
        :return: tuple of the account addresses
        """
        # may not be supported by all backends
        raise NotImplementedError('Current blockchain backend does not support creating pre-funded test accounts.')

    def get_balance(self, address: AddressValue) -> int:
        """Return the balance of the wallet with the designated address (in wei)."""
        return self._get_balance(AddressValue(address).val)

    def contract_address(self, contract_handle) -> AddressValue:
        """Return the address under which the contract behind contract_handle is deployed."""
        return AddressValue(self._contract_address(contract_handle))

    def call(self, contract_handle, sender: AddressValue, name: str, *args) -> Union[bool, int, str, bytes, List]:
        """
        Call the specified view function in the given contract with the provided arguments.

        :param contract_handle: the contract in which the function resides
        :param sender: sender address
        :param name: name of the function to call
        :param args: argument values
        :raise BlockChainError: if request fails
        :return: function return value (single value if one return value, list if multiple return values)
        """
        assert contract_handle is not None
        lt_print(f'Calling contract function {name}{Value.collection_to_string(args)}', verbosity_level=2)
        val = self._call(contract_handle, sender.val, name, *Value.unwrap_values(list(args)))
        lt_print(f'Got return value {val}', verbosity_level=2)
        return val

    def transact(self, contract_handle, sender: AddressValue, function: str, actual_args: List, wei_amount: Optional[int] = None) -> Any:
        """
        Issue a transaction for the specified function in the given contract with the provided arguments

        **WARNING: THIS ISSUES A CRYPTO CURRENCY TRANSACTION (GAS COST)**

        :param contract_handle: the contract in which the function resides
        :param sender: sender address, its eth private key must be hosted in the eth node to which the backend connects.
        :param function: name of the function
        :param actual_args: the function argument values
        :param wei_amount: how much money to send along with the transaction (only for payable functions)
        :raise BlockChainError: if there is an error in the backend
        :raise CallRejected: if the contract rejected the transaction, no state was changed
        :raise ValueError: if wei_amount is not a non-negative int
        :return: backend-specific transaction receipt
        """
        assert contract_handle is not None
        if wei_amount is not None and not isinstance(wei_amount, int):
            raise ValueError(f'Transaction value must be an int amount of wei, was {wei_amount!r}')
        if wei_amount is not None and wei_amount < 0:
            raise ValueError(f'Transaction value must not be negative, was {wei_amount}')
        lt_print(f'Issuing transaction for function "{function}" from account "{sender}"')
        lt_print(Value.collection_to_string(actual_args), verbosity_level=2)
        ret = self._transact(contract_handle, sender.val, function, *Value.unwrap_values(actual_args), wei_amount=wei_amount)
        lt_print()
        return ret

    def deploy(self, sender: AddressValue, wei_amount: Optional[int] = None) -> Any:
        """
        Issue a deployment transaction which creates a new Lottery contract, sender becomes its manager.

        **WARNING: THIS ISSUES A CRYPTO CURRENCY TRANSACTION (GAS COST)**

        :param sender: creator address, its eth private key must be hosted in the eth node to which the backend connects.
        :param wei_amount: how much money to send along with the constructor transaction
        :raise BlockChainError: if there is an error in the backend
        :raise TransactionFailedException: if the deployment transaction failed
        :return: handle for the newly created contract
        """
        lt_print_banner('Deploy Lottery')
        ret = self._deploy(sender.val, wei_amount=wei_amount)
        lt_print()
        return ret

    def connect(self, contract_address: AddressValue) -> Any:
        """
        Create a handle which can be used to interact with an existing Lottery contract on the chain.

        :param contract_address: address of the deployed contract
        :raise IntegrityError: if the remote contract does not match the local Lottery contract
        :raise BlockChainError: if there is an error in the backend
        :return: contract handle
        """
        lt_print_banner('Connect to Lottery')
        return self._connect(AddressValue(contract_address).val)

    # INTERNAL FUNCTIONALITY

    @abstractmethod
    def _default_address(self) -> Union[None, bytes, str]:
        pass

    @abstractmethod
    def _get_balance(self, address: str) -> int:
        pass

    @abstractmethod
    def _contract_address(self, contract_handle) -> str:
        pass

    @abstractmethod
    def _call(self, contract_handle, sender: str, name: str, *args) -> Union[bool, int, str, List]:
        pass

    @abstractmethod
    def _transact(self, contract_handle, sender: str, function: str, *actual_args, wei_amount: Optional[int] = None) -> Any:
        pass

    @abstractmethod
    def _deploy(self, sender: str, wei_amount: Optional[int] = None) -> Any:
        pass

    @abstractmethod
    def _connect(self, address: str) -> Any:
        pass
