"""
This module contains the definitions of all lottery errors which may be publicly raised by the harness
"""


class LotteryError(Exception):
    """
    Base class of all lottery errors
    """
    pass


class CallRejected(LotteryError):
    """
    A lottery call was rejected as a whole, none of its effects were applied
    """
    pass


class InsufficientPayment(CallRejected):
    """
    Entry payment below the minimum entry amount
    """
    pass


class Unauthorized(CallRejected):
    """
    Privileged call issued by an account other than the manager
    """
    pass


class NoPlayers(CallRejected):
    """
    Winner requested for a round without players
    """
    pass
