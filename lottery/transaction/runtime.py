from lottery.config import cfg
from lottery.transaction.interface import LotteryBlockchainInterface
from lottery.transaction.blockchain import *

_blockchain_classes = {
    'w3-eth-tester': Web3TesterBlockchain,
    'w3-ganache': Web3HttpGanacheBlockchain,
    'w3-ipc': Web3IpcBlockchain,
    'w3-websocket': Web3WebsocketBlockchain,
    'w3-http': Web3HttpBlockchain,
    'w3-custom': Web3CustomBlockchain,
    'simulated': SimulatedBlockchain
}


class Runtime:
    """
    Provides global access to the singleton blockchain backend instance.
    See interface.py for more information.

    The global configuration in config.py determines which backend is made available via the Runtime class.
    """

    __blockchain = None

    @staticmethod
    def reset():
        """
        Reboot the runtime.

        When a new backend is selected in the configuration, it will only be loaded after a runtime reset.
        For debug backends this also discards the whole chain state.
        """
        Runtime.__blockchain = None

    @staticmethod
    def blockchain() -> LotteryBlockchainInterface:
        """Return singleton object which implements LotteryBlockchainInterface."""
        if Runtime.__blockchain is None:
            Runtime.__blockchain = _blockchain_classes[cfg.blockchain_backend]()
            from lottery.transaction.types import AddressValue
            AddressValue.get_balance = Runtime.__blockchain.get_balance
        return Runtime.__blockchain
