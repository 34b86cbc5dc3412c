"""
This package contains the blockchain interaction backends

==========
Submodules
==========
* :py:mod:`.web3py`: Contains several web3-based backends.
* :py:mod:`.simulated`: In-process backend which runs the lottery state machine without a chain.
"""

from .web3py import Web3TesterBlockchain, Web3HttpGanacheBlockchain
from .web3py import Web3IpcBlockchain, Web3WebsocketBlockchain, Web3HttpBlockchain, Web3CustomBlockchain
from .simulated import SimulatedBlockchain
