"""
In-process model of the Lottery contract state machine.

The object holds a manager, an ordered list of players and the pooled balance (in wei). All operations are
all-or-nothing: a rejected call raises a :py:class:`~lottery.errors.exceptions.CallRejected` subclass before any
field is touched. Calls are expected to be serialized by the caller (a backend or a test), no locking is done here.

Off chain there is no consensus to make the winner selection manipulation resistant, the default randomness source is
therefore pycryptodome's CSPRNG rather than anything derived from call inputs.
"""

from typing import Callable, List, Tuple

from Crypto.Random.random import randrange

from lottery.errors.exceptions import InsufficientPayment, Unauthorized, NoPlayers
from lottery.transaction.types import AddressValue

ETHER = 10 ** 18

MINIMUM_ENTRY = ETHER // 50
"""Smallest accepted entry payment in wei (0.02 ether), same value as Lottery.MINIMUM_ENTRY on chain."""


class LotteryState:
    def __init__(self, manager: AddressValue, *, minimum_entry: int = MINIMUM_ENTRY,
                 rng: Callable[[int], int] = randrange) -> None:
        """
        Create a new lottery owned by manager.

        :param manager: creator identity, the only account allowed to pick a winner
        :param minimum_entry: smallest accepted payment in wei
        :param rng: randrange-compatible callable, rng(n) must return a uniformly distributed int in [0, n)
        """
        if minimum_entry < 0:
            raise ValueError(f'Minimum entry must not be negative, was {minimum_entry}')
        self.__manager = AddressValue(manager)
        self.__minimum_entry = minimum_entry
        self.__rng = rng
        self.__players: List[AddressValue] = []
        self.__balance = 0

    @property
    def manager(self) -> AddressValue:
        return self.__manager

    @property
    def minimum_entry(self) -> int:
        return self.__minimum_entry

    @property
    def balance(self) -> int:
        """Sum of all accepted entries of the current round in wei."""
        return self.__balance

    def join(self, caller: AddressValue, payment: int) -> None:
        """
        Add caller to the players of the current round.

        :raise ValueError: if payment is not an int or negative
        :raise InsufficientPayment: if payment is below the minimum entry
        """
        if not isinstance(payment, int):
            raise ValueError(f'Payment must be an int amount of wei, was {payment!r}')
        if payment < 0:
            raise ValueError(f'Payment must not be negative, was {payment}')
        if payment < self.__minimum_entry:
            raise InsufficientPayment(f'Entry of {payment} wei is below the minimum of {self.__minimum_entry} wei')
        self.__players.append(AddressValue(caller))
        self.__balance += payment

    def get_players(self) -> List[AddressValue]:
        return list(self.__players)

    def pick_winner(self, caller: AddressValue) -> Tuple[AddressValue, int]:
        """
        Select a winner among the current players and close the round.

        The whole balance is assigned to the winner, the players are cleared and the balance is reset to 0.
        The caller is responsible for crediting the returned amount to the winner's account.

        :raise Unauthorized: if caller is not the manager
        :raise NoPlayers: if nobody entered the current round
        :return: (winner, paid out amount in wei)
        """
        if AddressValue(caller) != self.__manager:
            raise Unauthorized(f'Only the manager {self.__manager} may pick a winner, not {caller}')
        if not self.__players:
            raise NoPlayers('Cannot pick a winner without players')

        idx = self.__rng(len(self.__players))
        if not 0 <= idx < len(self.__players):
            raise ValueError(f'Randomness source returned out of range index {idx}')
        winner, amount = self.__players[idx], self.__balance
        self.__players = []
        self.__balance = 0
        return winner, amount
