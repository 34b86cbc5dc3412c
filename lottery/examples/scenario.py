from contextlib import nullcontext
from typing import Any, Optional, List, Union, Dict, Type
from unittest import TestCase

from lottery.config import lt_print
from lottery.transaction.offchain import LotteryContract
from lottery.transaction.runtime import Runtime
from lottery.transaction.types import AddressValue


class TransactionAssertion:
    def check_assertion(self, test: TestCase, user_terminals: Dict[str, LotteryContract], snapshots: Dict[str, int]):
        pass


class DeployedAssertion(TransactionAssertion):
    def __init__(self, owner: str) -> None:
        super().__init__()
        self.owner = owner

    def check_assertion(self, test: TestCase, user_terminals: Dict[str, LotteryContract], snapshots: Dict[str, int]):
        contract = user_terminals[self.owner]
        test.assertIsNotNone(contract.address)
        for user in user_terminals.values():
            test.assertEqual(contract.address, user.address)
            test.assertEqual(contract.user, user.manager())


class PlayersAssertion(TransactionAssertion):
    def __init__(self, *expected_players: str, user: Optional[str] = None) -> None:
        super().__init__()
        self.user = user
        self.expected = expected_players

    def check_assertion(self, test: TestCase, user_terminals: Dict[str, LotteryContract], snapshots: Dict[str, int]):
        user = next(iter(user_terminals.values())) if self.user is None else user_terminals[self.user]
        expected = [user_terminals[name].user for name in self.expected]
        actual = user.get_players()
        test.assertEqual(expected, actual, f"Assertion players == [{', '.join(self.expected)}]")
        test.assertEqual(actual, user.get_players(), 'getPlayers is not idempotent')


class ContractBalanceAssertion(TransactionAssertion):
    def __init__(self, expected_balance: int) -> None:
        super().__init__()
        self.balance = expected_balance

    def check_assertion(self, test: TestCase, user_terminals: Dict[str, LotteryContract], snapshots: Dict[str, int]):
        contract = next(iter(user_terminals.values()))
        test.assertEqual(self.balance, contract.balance)


class BalanceChangeAssertion(TransactionAssertion):
    def __init__(self, user: str, expected_change: int) -> None:
        super().__init__()
        self.user = user
        self.expected_change = expected_change

    def check_assertion(self, test: TestCase, user_terminals: Dict[str, LotteryContract], snapshots: Dict[str, int]):
        actual_change = user_terminals[self.user].user.balance - snapshots[self.user]
        test.assertEqual(self.expected_change, actual_change, f'Assertion balance change of {self.user} == {self.expected_change}')


class SinglePayoutAssertion(TransactionAssertion):
    """Exactly one of the given users gained exactly amount since the last snapshot, all others are unchanged."""

    def __init__(self, users: List[str], amount: int) -> None:
        super().__init__()
        self.users = users
        self.amount = amount

    def check_assertion(self, test: TestCase, user_terminals: Dict[str, LotteryContract], snapshots: Dict[str, int]):
        changes = {name: user_terminals[name].user.balance - snapshots[name] for name in self.users}
        winners = [name for name, change in changes.items() if change != 0]
        test.assertEqual(1, len(winners), f'Expected exactly one winner, balance changes were {changes}')
        test.assertEqual(self.amount, changes[winners[0]])


class BalanceSnapshot:
    def __init__(self, *users: str) -> None:
        self.users = users

    def take(self, user_terminals: Dict[str, LotteryContract], snapshots: Dict[str, int]):
        for name in self.users:
            snapshots[name] = user_terminals[name].user.balance


class Transaction:
    def __init__(self, user: str, name: str, *args: Any, amount: Optional[int] = None,
                 expected_exception: Optional[Type[Exception]] = None):
        super().__init__()
        self.user = user
        self.name = name
        self.args = args
        self.amount = amount
        self.expected_exception = expected_exception

    def __str__(self):
        return f"{self.name}({', '.join([str(arg) for arg in self.args])}){{amount={self.amount}, user={self.user}}}"


class Scenario:
    def __init__(self, name: str):
        self._name = name
        self._users = None
        self._owner = None
        self._steps = []

    def name(self):
        return self._name

    def users(self) -> List[str]:
        # Names of the participating users, in account allocation order
        return self._users

    def owner(self) -> str:
        # Name of the user who deploys the contract
        return self._owner

    def steps(self) -> List[Union[Transaction, TransactionAssertion, BalanceSnapshot]]:
        # Transactions, snapshots and assertions in execution order
        return self._steps

    def run(self, test: TestCase):
        """
        Execute this scenario against the blockchain backend selected in the configuration.

        A fresh backend is created (Runtime.reset), every user gets a pre-funded dummy account, the owner deploys
        the contract and every other user connects to it. Assertion failures are reported through test.
        """
        Runtime.reset()

        user_addresses = LotteryContract.create_dummy_accounts(len(self._users))
        if isinstance(user_addresses, AddressValue):
            user_addresses = (user_addresses, )
        user_addresses = {name: address for name, address in zip(self._users, user_addresses)}

        # Deploy contract and connect all users, owner first
        contract = LotteryContract.deploy(user=user_addresses[self._owner])
        users = {self._owner: contract}
        for user, address in user_addresses.items():
            if user != self._owner:
                users[user] = LotteryContract.connect(contract.address, user=address)
                test.assertIsNotNone(users[user])

        snapshots: Dict[str, int] = {}
        for step in self._steps:
            if isinstance(step, TransactionAssertion):
                step.check_assertion(test, users, snapshots)
            elif isinstance(step, BalanceSnapshot):
                step.take(users, snapshots)
            else:
                lt_print(f'Transaction: {step}')
                exception = step.expected_exception
                with nullcontext() if exception is None else test.assertRaises(exception):
                    transact = getattr(users[step.user], step.name)
                    args = [users[arg].user if isinstance(arg, str) and arg in users else arg for arg in step.args]
                    if step.amount is None:
                        receipt = transact(*args)
                    else:
                        receipt = transact(*args, wei_amount=step.amount)
                    test.assertIsNotNone(receipt)


class ScenarioBuilder:
    def __init__(self, name: str) -> None:
        super().__init__()
        self.scenario = Scenario(name)

    def set_users(self, *users: str):
        self.scenario._users = list(users)
        return self

    def set_owner(self, owner: str):
        assert self.scenario._owner is None
        self.scenario._owner = owner
        return self

    def add_transaction(self, fname: str, args: Optional[List] = None, *, user: str, amount=None, expected_exception=None):
        args = [] if args is None else args
        t = Transaction(user, fname, *args, amount=amount, expected_exception=expected_exception)
        self.scenario._steps.append(t)
        return self

    def enter(self, user: str, amount: int, expected_exception=None):
        return self.add_transaction('enter', user=user, amount=amount, expected_exception=expected_exception)

    def pick_winner(self, user: str, expected_exception=None):
        return self.add_transaction('pick_winner', user=user, expected_exception=expected_exception)

    def snapshot_balances(self, *users: str):
        self.scenario._steps.append(BalanceSnapshot(*users))
        return self

    def add_assertion(self, assertion: TransactionAssertion):
        self.scenario._steps.append(assertion)
        return self

    def add_deployed_assertion(self):
        assert self.scenario.owner() is not None
        return self.add_assertion(DeployedAssertion(self.scenario.owner()))

    def add_players_assertion(self, *expected_players: str, user: Optional[str] = None):
        return self.add_assertion(PlayersAssertion(*expected_players, user=user))

    def add_balance_assertion(self, expected_balance: int):
        return self.add_assertion(ContractBalanceAssertion(expected_balance))

    def add_balance_change_assertion(self, user: str, expected_change: int):
        return self.add_assertion(BalanceChangeAssertion(user, expected_change))

    def add_single_payout_assertion(self, users: List[str], amount: int):
        return self.add_assertion(SinglePayoutAssertion(users, amount))

    def build(self) -> Scenario:
        assert self.scenario.users() is not None
        assert self.scenario.owner() in self.scenario.users()
        return self.scenario
