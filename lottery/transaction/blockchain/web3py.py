from abc import abstractmethod
from typing import Any, Dict, Optional, Tuple, Union

from eth_tester import PyEVMBackend, EthereumTester
from eth_tester.exceptions import TransactionFailed
from web3 import Web3, EthereumTesterProvider, HTTPProvider, IPCProvider, WebsocketProvider
from web3.exceptions import ContractLogicError

from lottery import my_logging
from lottery.compiler.solidity.compiler import compile_contract
from lottery.config import cfg, lt_print
from lottery.contracts import lottery_sol, rejection_for_reason
from lottery.my_logging.log_context import log_context
from lottery.transaction.interface import LotteryBlockchainInterface, IntegrityError, BlockChainError, \
    TransactionFailedException
from lottery.utils.timer import time_measure


def _revert_message(e: Exception) -> str:
    # eth-tester may report the raw revert data, the abi encoded reason string stays readable as utf-8
    return ' '.join(arg.decode('utf-8', errors='ignore') if isinstance(arg, bytes) else str(arg) for arg in e.args)


class Web3Blockchain(LotteryBlockchainInterface):
    def __init__(self) -> None:
        super().__init__()
        self.w3 = self._create_w3_instance()
        if not self.w3.is_connected():
            raise BlockChainError(f'Failed to connect to blockchain: {self.w3.provider}')
        self._lottery_interface: Optional[Dict] = None

    @property
    def lottery_interface(self) -> Dict:
        """abi, creation and runtime code of the local Lottery contract (compiled on first use)"""
        if self._lottery_interface is None:
            with time_measure('compile_lottery'):
                self._lottery_interface = compile_contract(lottery_sol, cfg.contract_name)
        return self._lottery_interface

    @abstractmethod
    def _create_w3_instance(self) -> Web3:
        pass

    def _default_address(self) -> Union[None, bytes, str]:
        if cfg.blockchain_default_account is None:
            return None
        elif isinstance(cfg.blockchain_default_account, int):
            return self.w3.eth.accounts[cfg.blockchain_default_account]
        else:
            return cfg.blockchain_default_account

    def _get_balance(self, address: str) -> int:
        return self.w3.eth.get_balance(address)

    def _contract_address(self, contract_handle) -> str:
        return contract_handle.address

    def _call(self, contract_handle, sender: str, name: str, *args) -> Union[bool, int, str, list]:
        try:
            return contract_handle.functions[name](*args).call({'from': sender})
        except Exception as e:
            raise BlockChainError(e.args)

    def _transact(self, contract_handle, sender: str, function: str, *actual_params, wei_amount: Optional[int] = None) -> Any:
        try:
            fct = contract_handle.constructor if function == 'constructor' else contract_handle.functions[function]
            tx = {'from': sender}
            if wei_amount:
                tx['value'] = wei_amount
            tx['gas'] = self._gas_heuristic(fct(*actual_params), tx)
            with time_measure('transaction'):
                tx_hash = fct(*actual_params).transact(tx)
                tx_receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash)
        except (ContractLogicError, TransactionFailed) as e:
            raise self._rejection(e) from e
        except Exception as e:
            raise BlockChainError(e.args)

        if tx_receipt['status'] == 0:
            raise TransactionFailedException("Transaction failed")
        gas = tx_receipt['gasUsed']
        lt_print(f"Consumed gas: {gas}")
        my_logging.data('gas', gas)
        return tx_receipt

    @staticmethod
    def _rejection(e: Exception) -> TransactionFailedException:
        message = _revert_message(e)
        exc = rejection_for_reason(message)
        if exc is None:
            return TransactionFailedException(f'Transaction reverted: {message}')
        return exc(message)

    def _deploy(self, sender: str, wei_amount: Optional[int] = None) -> Any:
        with log_context('constructor', cfg.contract_name):
            handle = self._deploy_contract(sender, self.lottery_interface, wei_amount=wei_amount)
        lt_print(f'Deployed contract "{cfg.contract_name}" at address "{handle.address}"')
        return handle

    def _deploy_contract(self, sender: str, contract_interface, *args, wei_amount: Optional[int] = None):
        contract = self.w3.eth.contract(
            abi=contract_interface['abi'],
            bytecode=contract_interface['bin']
        )

        tx_receipt = self._transact(contract, sender, 'constructor', *args, wei_amount=wei_amount)
        contract = self.w3.eth.contract(
            address=tx_receipt['contractAddress'], abi=contract_interface['abi']
        )
        return contract

    def _connect(self, address: str) -> Any:
        return self._verify_contract_integrity(address, self.lottery_interface)

    def _verify_contract_integrity(self, address: str, contract_interface: Dict) -> Any:
        actual_byte_code = self.__normalized_hex(self.w3.eth.get_code(address))
        if not actual_byte_code:
            raise IntegrityError(f'Expected contract {cfg.contract_name} is not deployed at address {address}')

        expected_byte_code = self.__normalized_hex(contract_interface['deployed_bin'])
        if actual_byte_code != expected_byte_code:
            raise IntegrityError(f'Deployed contract at address {address} does not match local contract {cfg.contract_filename}')
        lt_print(f'Contract@{address} matches {cfg.contract_filename}:{cfg.contract_name}')

        return self.w3.eth.contract(
            address=address, abi=contract_interface['abi']
        )

    @staticmethod
    def __normalized_hex(val: Union[str, bytes]) -> str:
        if not isinstance(val, str):
            val = val.hex()
        val = val[2:] if val.startswith('0x') else val
        return val.lower()

    def _gas_heuristic(self, fct, tx: Dict) -> int:
        limit = self.w3.eth.get_block('latest')['gasLimit']
        estimate = fct.estimate_gas(dict(tx, gas=limit))
        return min(int(estimate * 1.2), limit)


class Web3TesterBlockchain(Web3Blockchain):
    def __init__(self) -> None:
        self.eth_tester = None
        super().__init__()
        self.next_acc_idx = 1

    @classmethod
    def is_debug_backend(cls) -> bool:
        return True

    def _create_w3_instance(self) -> Web3:
        self.eth_tester = EthereumTester(backend=PyEVMBackend())
        w3 = Web3(EthereumTesterProvider(self.eth_tester))
        return w3

    def create_test_accounts(self, count: int) -> Tuple:
        accounts = self.w3.eth.accounts
        if len(accounts[self.next_acc_idx:]) < count:
            raise ValueError(f'Can have at most {len(accounts)-1} dummy accounts in total')
        dummy_accounts = tuple(accounts[self.next_acc_idx:self.next_acc_idx + count])
        self.next_acc_idx += count
        return dummy_accounts

    def _gas_heuristic(self, fct, tx: Dict) -> int:
        return cfg.blockchain_gas_limit


class Web3IpcBlockchain(Web3Blockchain):
    def _create_w3_instance(self) -> Web3:
        assert cfg.blockchain_node_uri is None or isinstance(cfg.blockchain_node_uri, str)
        return Web3(IPCProvider(cfg.blockchain_node_uri))


class Web3WebsocketBlockchain(Web3Blockchain):
    def _create_w3_instance(self) -> Web3:
        assert cfg.blockchain_node_uri is None or isinstance(cfg.blockchain_node_uri, str)
        return Web3(WebsocketProvider(cfg.blockchain_node_uri))


class Web3HttpBlockchain(Web3Blockchain):
    def _create_w3_instance(self) -> Web3:
        assert cfg.blockchain_node_uri is None or isinstance(cfg.blockchain_node_uri, str)
        return Web3(HTTPProvider(cfg.blockchain_node_uri))


class Web3HttpGanacheBlockchain(Web3HttpBlockchain):
    def __init__(self) -> None:
        super().__init__()
        self.next_acc_idx = 1

    @classmethod
    def is_debug_backend(cls) -> bool:
        return True

    def create_test_accounts(self, count: int) -> Tuple:
        accounts = self.w3.eth.accounts
        if len(accounts[self.next_acc_idx:]) < count:
            raise ValueError(f'Can have at most {len(accounts)-1} dummy accounts in total')
        dummy_accounts = tuple(accounts[self.next_acc_idx:self.next_acc_idx + count])
        self.next_acc_idx += count
        return dummy_accounts

    def _gas_heuristic(self, fct, tx: Dict) -> int:
        return min(cfg.blockchain_gas_limit, self.w3.eth.get_block('latest')['gasLimit'])


class Web3CustomBlockchain(Web3Blockchain):
    def _create_w3_instance(self) -> Web3:
        assert isinstance(cfg.blockchain_node_uri, Web3)
        return cfg.blockchain_node_uri
