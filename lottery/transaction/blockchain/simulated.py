from typing import Any, Dict, List, Optional, Tuple, Union

from Crypto.Random.random import randrange
from eth_utils import keccak, to_checksum_address

from lottery.config import cfg, lt_print
from lottery.state import LotteryState, ETHER
from lottery.transaction.interface import LotteryBlockchainInterface, IntegrityError, BlockChainError, \
    TransactionFailedException
from lottery.transaction.types import AddressValue

initial_account_balance = 1000000 * ETHER
account_count = 10


class SimulatedContract:
    """Handle of a Lottery instance living inside a SimulatedBlockchain."""

    def __init__(self, address: str, state: LotteryState) -> None:
        self.address = address
        self.state = state


class SimulatedBlockchain(LotteryBlockchainInterface):
    """
    In-process chain which runs the lottery state machine directly, without EVM or solc.

    Accounts are pre-funded like eth-tester accounts, transactions are applied one at a time in call order
    and cost no gas.
    """

    def __init__(self) -> None:
        super().__init__()
        self.accounts: List[str] = [to_checksum_address(keccak(text=f'lottery-account-{i}')[-20:]) for i in range(account_count)]
        self.balances: Dict[str, int] = {acc: initial_account_balance for acc in self.accounts}
        self.contracts: Dict[str, SimulatedContract] = {}
        self.nonces: Dict[str, int] = {}
        self.block_number = 0
        self.rng = randrange
        self.next_acc_idx = 1

    @classmethod
    def is_debug_backend(cls) -> bool:
        return True

    def create_test_accounts(self, count: int) -> Tuple:
        if len(self.accounts[self.next_acc_idx:]) < count:
            raise ValueError(f'Can have at most {len(self.accounts)-1} dummy accounts in total')
        dummy_accounts = tuple(self.accounts[self.next_acc_idx:self.next_acc_idx + count])
        self.next_acc_idx += count
        return dummy_accounts

    def _default_address(self) -> Union[None, bytes, str]:
        if cfg.blockchain_default_account is None:
            return None
        elif isinstance(cfg.blockchain_default_account, int):
            return self.accounts[cfg.blockchain_default_account]
        else:
            return cfg.blockchain_default_account

    def _get_balance(self, address: str) -> int:
        if address in self.contracts:
            return self.contracts[address].state.balance
        return self.balances.get(address, 0)

    def _contract_address(self, contract_handle: SimulatedContract) -> str:
        return contract_handle.address

    def _call(self, contract_handle: SimulatedContract, sender: str, name: str, *args) -> Union[bool, int, str, List]:
        state = contract_handle.state
        if name == 'getPlayers':
            return [p.val for p in state.get_players()]
        elif name == 'players':
            players = state.get_players()
            if len(args) != 1 or not 0 <= args[0] < len(players):
                raise BlockChainError(f'Invalid players index {args}')
            return players[args[0]].val
        elif name == 'manager':
            return state.manager.val
        elif name == 'MINIMUM_ENTRY':
            return state.minimum_entry
        else:
            raise BlockChainError(f'Contract {cfg.contract_name} has no view function "{name}"')

    def _transact(self, contract_handle: SimulatedContract, sender: str, function: str, *actual_args,
                  wei_amount: Optional[int] = None) -> Any:
        wei_amount = 0 if wei_amount is None else wei_amount
        if self.balances.get(sender, 0) < wei_amount:
            raise BlockChainError(f'Sender {sender} has insufficient funds for a transfer of {wei_amount} wei')
        state = contract_handle.state

        if function == 'enter':
            state.join(AddressValue(sender), wei_amount)
            self.balances[sender] -= wei_amount
        elif function == 'pickWinner':
            if wei_amount:
                raise TransactionFailedException('pickWinner is not payable')
            winner, amount = state.pick_winner(AddressValue(sender))
            self.balances[winner.val] = self.balances.get(winner.val, 0) + amount
            lt_print(f'Paid {amount} wei to {winner}', verbosity_level=2)
        else:
            raise BlockChainError(f'Contract {cfg.contract_name} has no function "{function}"')
        return self.__receipt(sender)

    def _deploy(self, sender: str, wei_amount: Optional[int] = None) -> Any:
        if wei_amount:
            raise TransactionFailedException('Lottery constructor is not payable')
        nonce = self.nonces.get(sender, 0)
        address = to_checksum_address(keccak(text=f'{sender}:{nonce}')[-20:])
        contract = SimulatedContract(address, LotteryState(AddressValue(sender), rng=self.rng))
        self.contracts[address] = contract
        self.__receipt(sender, contract_address=address)
        lt_print(f'Deployed contract "{cfg.contract_name}" at address "{address}"')
        return contract

    def _connect(self, address: str) -> Any:
        if address not in self.contracts:
            raise IntegrityError(f'Expected contract {cfg.contract_name} is not deployed at address {address}')
        return self.contracts[address]

    def __receipt(self, sender: str, contract_address: Optional[str] = None) -> Dict:
        nonce = self.nonces.get(sender, 0)
        self.nonces[sender] = nonce + 1
        self.block_number += 1
        return {
            'status': 1,
            'from': sender,
            'blockNumber': self.block_number,
            'transactionHash': keccak(text=f'{sender}:{nonce}:tx'),
            'gasUsed': 0,
            'contractAddress': contract_address,
        }
