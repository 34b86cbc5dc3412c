import os
from unittest import TestCase
from abc import ABCMeta

from lottery.config import cfg

skip_chain_tests = os.environ.get('LOTTERY_SKIP_CHAIN_TESTS', '0') == '1'
"""If set, tests which need solc and an EVM (eth-tester) are skipped"""


class LotteryTestCase(TestCase, metaclass=ABCMeta):
    def __init__(self, methodName: str = 'runTest') -> None:
        super().__init__(methodName)
        self.old_was_unit_test = None

    def setUp(self) -> None:
        self.old_was_unit_test = cfg.is_unit_test
        cfg.is_unit_test = True
        super().setUp()

    def tearDown(self) -> None:
        super().tearDown()
        cfg.is_unit_test = self.old_was_unit_test
