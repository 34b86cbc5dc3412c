import unittest
from contextlib import contextmanager

from parameterized import parameterized_class

from lottery.config import cfg
from lottery.examples.scenarios import all_scenarios, get_scenario
from lottery.tests.lottery_unit_test import LotteryTestCase, skip_chain_tests
from lottery.transaction.runtime import Runtime


@contextmanager
def _mock_config(backend: str):
    old_backend = cfg.blockchain_backend
    cfg.blockchain_backend = backend
    Runtime.reset()
    try:
        yield
    finally:
        cfg.blockchain_backend = old_backend
        Runtime.reset()


class TestScenarioBase(LotteryTestCase):
    def run_scenario(self, backend: str):
        with _mock_config(backend):
            self.scenario.run(self)


@parameterized_class(('name', 'scenario'), all_scenarios)
class TestScenariosSimulated(TestScenarioBase):
    def test_scenario(self):
        self.run_scenario('simulated')


@parameterized_class(('name', 'scenario'), all_scenarios)
@unittest.skipIf(skip_chain_tests, 'chain tests disabled')
class TestScenariosEthTester(TestScenarioBase):
    def test_scenario(self):
        self.run_scenario('w3-eth-tester')


class TestScenarioRegistry(LotteryTestCase):
    def test_names_are_unique(self):
        names = [name for name, _ in all_scenarios]
        self.assertEqual(len(names), len(set(names)))

    def test_get_scenario(self):
        self.assertEqual(1, len(get_scenario('payout_and_reset')))
        self.assertEqual([], get_scenario('does_not_exist'))

    def test_owner_is_participant(self):
        for _, scenario in all_scenarios:
            self.assertIn(scenario.owner(), scenario.users())
