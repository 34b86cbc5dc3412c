"""
This package contains the Solidity source of the Lottery contract and the glue which ties its revert reasons to the
harness exceptions.
"""
import os
from typing import Dict, Optional, Type

from lottery.errors.exceptions import CallRejected, InsufficientPayment, Unauthorized, NoPlayers
from lottery.utils.helpers import read_file

contracts_dir = os.path.dirname(os.path.realpath(__file__))
lottery_sol = os.path.join(contracts_dir, 'Lottery.sol')

revert_reasons: Dict[str, Type[CallRejected]] = {
    'Lottery: entry below minimum': InsufficientPayment,
    'Lottery: caller is not the manager': Unauthorized,
    'Lottery: no players': NoPlayers,
}
"""require() messages of Lottery.sol and the exception each of them is reported as"""


def get_lottery_contract_code() -> str:
    return read_file(lottery_sol)


def rejection_for_reason(message: str) -> Optional[Type[CallRejected]]:
    """Return the exception type for the revert reason contained in message (None if there is no known reason)."""
    for reason, exc in revert_reasons.items():
        if reason in message:
            return exc
    return None
