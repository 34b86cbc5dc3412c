import inspect
from contextlib import contextmanager
from typing import Dict, Optional, List, Tuple, Union, Any, ContextManager

from lottery import my_logging
from lottery.config import cfg, lt_print_banner
from lottery.errors.exceptions import CallRejected
from lottery.my_logging.log_context import log_context
from lottery.transaction.interface import BlockChainError
from lottery.transaction.runtime import Runtime
from lottery.transaction.types import AddressValue


class ApiWrapper:
    def __init__(self, user_addr: AddressValue) -> None:
        super().__init__()
        self.__conn = Runtime.blockchain()

        self.__contract_handle = None
        """Handle which refers to the deployed contract, this is passed to the blockchain interface when e.g. issuing transactions."""

        self.__user_addr = user_addr
        """From address for all transactions which are issued through this wrapper"""

    @property
    def address(self) -> AddressValue:
        return self.__conn.contract_address(self.__contract_handle)

    @property
    def user_address(self) -> AddressValue:
        return self.__user_addr

    def deploy(self, wei_amount: Optional[int] = None):
        self.__contract_handle = self.__conn.deploy(self.__user_addr, wei_amount=wei_amount)

    def connect(self, address: AddressValue):
        self.__contract_handle = self.__conn.connect(address)

    def transact(self, fname: str, args: List, wei_amount: Optional[int] = None) -> Any:
        return self.__conn.transact(self.__contract_handle, self.__user_addr, fname, args, wei_amount=wei_amount)

    def call(self, fname: str, args: List) -> Any:
        return self.__conn.call(self.__contract_handle, self.__user_addr, fname, *args)


class LotteryContract:
    """
    Handle through which a single user interacts with a deployed Lottery contract.

    Use :py:meth:`deploy` to create a new lottery (the user becomes its manager) and :py:meth:`connect`
    to obtain handles for further users of an existing lottery.
    """

    tidx: Dict[str, int] = {}

    def __init__(self, user_addr: AddressValue):
        self.api = ApiWrapper(AddressValue(user_addr))

    @property
    def address(self) -> AddressValue:
        return self.api.address

    @property
    def user(self) -> AddressValue:
        return self.api.user_address

    @staticmethod
    def default_address() -> Optional[AddressValue]:
        """Return default wallet address (if supported by backend, otherwise None is returned)."""
        return Runtime.blockchain().default_address

    @staticmethod
    def create_dummy_accounts(count: int) -> Union[AddressValue, Tuple[AddressValue, ...]]:
        """
        Create count pre-funded dummy accounts (if supported by backend)

        :param count: # of accounts to create
        :return: if count == 1 -> returns a address, otherwise returns a tuple of count addresses
        """
        accounts = tuple(AddressValue(acc) for acc in Runtime.blockchain().create_test_accounts(count))
        if len(accounts) == 1:
            return accounts[0]
        else:
            return accounts

    @staticmethod
    def _sender(user: Union[None, str, AddressValue]) -> AddressValue:
        if user is None:
            user = LotteryContract.default_address()
            if user is None:
                raise ValueError('No sender given and no default account configured')
        return AddressValue(user)

    @staticmethod
    def deploy(*, user: Union[None, str, AddressValue] = None, wei_amount: Optional[int] = None) -> 'LotteryContract':
        """
        Deploy a new Lottery contract, user becomes its manager.

        :param user: creator address (default: the backend's default account)
        :return: handle of the new contract for user
        """
        c = LotteryContract(LotteryContract._sender(user))
        with c._function_ctx(name='constructor'):
            c.api.deploy(wei_amount=wei_amount)
        return c

    @staticmethod
    def connect(address: Union[str, AddressValue], *, user: Union[None, str, AddressValue] = None) -> 'LotteryContract':
        """
        Connect user to the Lottery contract deployed at address.

        :raise IntegrityError: if there is no Lottery contract at address
        :return: handle of the existing contract for user
        """
        c = LotteryContract(LotteryContract._sender(user))
        c.api.connect(AddressValue(address))
        return c

    def enter(self, wei_amount: int) -> Any:
        """
        Enter the current round with a payment of wei_amount.

        :raise InsufficientPayment: if wei_amount is below the minimum entry (or a generic CallRejected on chains which do not report reasons)
        :return: transaction receipt
        """
        with self._function_ctx(name='enter'):
            return self.api.transact('enter', [], wei_amount=wei_amount)

    def pick_winner(self) -> Any:
        """
        Pay the whole contract balance to a randomly selected player and start a new round.

        :raise Unauthorized: if this handle's user is not the manager
        :raise NoPlayers: if nobody entered the current round
        :return: transaction receipt
        """
        with self._function_ctx(name='pickWinner'):
            return self.api.transact('pickWinner', [])

    def get_players(self) -> List[AddressValue]:
        """Return the players of the current round in entry order."""
        return [AddressValue(p) for p in self.api.call('getPlayers', [])]

    def manager(self) -> AddressValue:
        return AddressValue(self.api.call('manager', []))

    def minimum_entry(self) -> int:
        """Smallest accepted entry in wei"""
        return self.api.call('MINIMUM_ENTRY', [])

    @property
    def balance(self) -> int:
        """Current contract balance in wei."""
        return self.address.balance

    @staticmethod
    def reduced_help():
        def pred(obj):
            return inspect.isfunction(obj) and not obj.__name__.startswith('_')
        members = inspect.getmembers(LotteryContract, pred)

        print('Lottery contract functions:')
        for fname, fct in members:
            sig = str(inspect.signature(fct))
            if sig.startswith('(self'):
                sig = sig[5:] if not sig[5:].startswith(',') else sig[7:]
                print(f'{fname}({sig}')

    @contextmanager
    def _function_ctx(self, *, name: str = '?') -> ContextManager:
        lt_print_banner(f'Calling {name}')
        t_idx = self.tidx.get(name, 0)
        self.tidx[name] = t_idx + 1

        with log_context('transaction', f'{name}_{t_idx}'):
            try:
                yield
            except (CallRejected, BlockChainError, ValueError) as e:
                if not cfg.is_unit_test:
                    my_logging.warning(f'{name} by {self.user} failed: {e}')
                raise
