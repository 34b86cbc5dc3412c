"""
Bundled conformance scenarios for the Lottery contract.

all_scenarios is a list of (name, scenario) tuples (the format expected by parameterized_class).
"""
from typing import List, Tuple

from lottery.errors.exceptions import CallRejected
from lottery.examples.scenario import ScenarioBuilder, Scenario
from lottery.state import ETHER, MINIMUM_ENTRY

ENTRY = 2 * ETHER // 100

scenarios = []

sb = ScenarioBuilder('deploy').set_users('manager').set_owner('manager')
sb.add_deployed_assertion()
sb.add_players_assertion()
sb.add_balance_assertion(0)
scenarios.append(sb.build())

sb = ScenarioBuilder('single_entry').set_users('manager').set_owner('manager')
sb.enter('manager', ENTRY)
sb.add_players_assertion('manager')
sb.add_balance_assertion(ENTRY)
scenarios.append(sb.build())

sb = ScenarioBuilder('multiple_entries').set_users('manager', 'alice', 'bob').set_owner('manager')
sb.enter('manager', ENTRY)
sb.enter('alice', ENTRY)
sb.enter('bob', ENTRY)
sb.add_players_assertion('manager', 'alice', 'bob')
sb.add_players_assertion('manager', 'alice', 'bob', user='bob')
sb.add_balance_assertion(3 * ENTRY)
scenarios.append(sb.build())

sb = ScenarioBuilder('minimum_entry').set_users('manager', 'alice').set_owner('manager')
sb.enter('manager', 0, expected_exception=CallRejected)
sb.enter('alice', MINIMUM_ENTRY - 1, expected_exception=CallRejected)
sb.add_players_assertion()
sb.add_balance_assertion(0)
sb.enter('alice', MINIMUM_ENTRY)
sb.add_players_assertion('alice')
sb.add_balance_assertion(MINIMUM_ENTRY)
scenarios.append(sb.build())

sb = ScenarioBuilder('only_manager_picks_winner').set_users('manager', 'alice').set_owner('manager')
sb.enter('manager', ENTRY)
sb.pick_winner('alice', expected_exception=CallRejected)
sb.add_players_assertion('manager')
sb.add_balance_assertion(ENTRY)
scenarios.append(sb.build())

sb = ScenarioBuilder('payout_and_reset').set_users('manager', 'alice', 'bob').set_owner('manager')
sb.enter('bob', 2 * ETHER)
sb.snapshot_balances('bob')
sb.pick_winner('manager')
sb.add_balance_change_assertion('bob', 2 * ETHER)
sb.add_players_assertion()
sb.add_balance_assertion(0)
scenarios.append(sb.build())

sb = ScenarioBuilder('repeat_entries').set_users('manager', 'alice', 'bob').set_owner('manager')
sb.enter('alice', ENTRY)
sb.enter('alice', ENTRY)
sb.enter('bob', ENTRY)
sb.add_players_assertion('alice', 'alice', 'bob')
sb.add_balance_assertion(3 * ENTRY)
scenarios.append(sb.build())

sb = ScenarioBuilder('consecutive_rounds').set_users('manager', 'alice', 'bob', 'carol').set_owner('manager')
sb.enter('alice', ENTRY)
sb.enter('bob', 3 * ENTRY)
sb.snapshot_balances('alice', 'bob')
sb.pick_winner('manager')
sb.add_single_payout_assertion(['alice', 'bob'], 4 * ENTRY)
sb.add_players_assertion()
sb.add_balance_assertion(0)
sb.enter('carol', ENTRY)
sb.add_players_assertion('carol')
sb.snapshot_balances('carol')
sb.pick_winner('manager')
sb.add_balance_change_assertion('carol', ENTRY)
sb.add_balance_assertion(0)
scenarios.append(sb.build())

sb = ScenarioBuilder('empty_round').set_users('manager', 'alice').set_owner('manager')
sb.pick_winner('manager', expected_exception=CallRejected)
sb.enter('alice', ENTRY)
sb.pick_winner('manager')
sb.pick_winner('manager', expected_exception=CallRejected)
sb.add_players_assertion()
scenarios.append(sb.build())

all_scenarios: List[Tuple[str, Scenario]] = [(s.name(), s) for s in scenarios]


def get_scenario(name: str) -> List[Tuple[str, Scenario]]:
    return [(n, s) for n, s in all_scenarios if n == name]
