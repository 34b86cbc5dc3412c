from parameterized import parameterized

from lottery.errors.exceptions import InsufficientPayment, Unauthorized, NoPlayers, CallRejected
from lottery.state import LotteryState, MINIMUM_ENTRY, ETHER
from lottery.tests.lottery_unit_test import LotteryTestCase
from lottery.transaction.types import AddressValue

manager = AddressValue('0x' + '11' * 20)
alice = AddressValue('0x' + '22' * 20)
bob = AddressValue('0x' + '33' * 20)
carol = AddressValue('0x' + '44' * 20)


class TestLotteryState(LotteryTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.state = LotteryState(manager)

    def test_initial_state(self):
        self.assertEqual(manager, self.state.manager)
        self.assertEqual([], self.state.get_players())
        self.assertEqual(0, self.state.balance)
        self.assertEqual(2 * ETHER // 100, self.state.minimum_entry)

    def test_single_join(self):
        self.state.join(alice, MINIMUM_ENTRY)
        self.assertEqual([alice], self.state.get_players())
        self.assertEqual(MINIMUM_ENTRY, self.state.balance)

    def test_join_order(self):
        for player in [manager, alice, bob]:
            self.state.join(player, MINIMUM_ENTRY)
        self.assertEqual([manager, alice, bob], self.state.get_players())
        self.assertEqual(3 * MINIMUM_ENTRY, self.state.balance)

    def test_repeat_entries(self):
        self.state.join(alice, MINIMUM_ENTRY)
        self.state.join(alice, 2 * MINIMUM_ENTRY)
        self.assertEqual([alice, alice], self.state.get_players())
        self.assertEqual(3 * MINIMUM_ENTRY, self.state.balance)

    @parameterized.expand([('zero', 0), ('one_wei_short', MINIMUM_ENTRY - 1)])
    def test_join_below_minimum(self, _, payment):
        self.state.join(bob, MINIMUM_ENTRY)
        with self.assertRaises(InsufficientPayment):
            self.state.join(alice, payment)
        self.assertEqual([bob], self.state.get_players())
        self.assertEqual(MINIMUM_ENTRY, self.state.balance)

    def test_negative_payment(self):
        with self.assertRaises(ValueError):
            self.state.join(alice, -1)
        self.assertEqual([], self.state.get_players())

    def test_get_players_is_copy(self):
        self.state.join(alice, MINIMUM_ENTRY)
        players = self.state.get_players()
        players.append(bob)
        self.assertEqual([alice], self.state.get_players())
        self.assertEqual(self.state.get_players(), self.state.get_players())

    def test_pick_winner_unauthorized(self):
        self.state.join(alice, MINIMUM_ENTRY)
        for caller in [alice, bob]:
            with self.assertRaises(Unauthorized):
                self.state.pick_winner(caller)
        self.assertEqual([alice], self.state.get_players())
        self.assertEqual(MINIMUM_ENTRY, self.state.balance)

    def test_unauthorized_checked_before_players(self):
        with self.assertRaises(Unauthorized):
            self.state.pick_winner(alice)

    def test_pick_winner_without_players(self):
        with self.assertRaises(NoPlayers):
            self.state.pick_winner(manager)
        self.assertEqual(0, self.state.balance)

    def test_errors_are_rejections(self):
        for exc in [InsufficientPayment, Unauthorized, NoPlayers]:
            self.assertTrue(issubclass(exc, CallRejected))

    def test_pick_winner_pays_everything(self):
        self.state.join(bob, 2 * ETHER)
        winner, amount = self.state.pick_winner(manager)
        self.assertEqual(bob, winner)
        self.assertEqual(2 * ETHER, amount)
        self.assertEqual([], self.state.get_players())
        self.assertEqual(0, self.state.balance)

    def test_pick_winner_uses_rng(self):
        state = LotteryState(manager, rng=lambda n: n - 1)
        for player in [alice, bob, carol]:
            state.join(player, MINIMUM_ENTRY)
        winner, amount = state.pick_winner(manager)
        self.assertEqual(carol, winner)
        self.assertEqual(3 * MINIMUM_ENTRY, amount)

    def test_pick_winner_selects_prior_entrant(self):
        entrants = [alice, bob, carol]
        for _ in range(20):
            for player in entrants:
                self.state.join(player, MINIMUM_ENTRY)
            winner, amount = self.state.pick_winner(manager)
            self.assertIn(winner, entrants)
            self.assertEqual(3 * MINIMUM_ENTRY, amount)

    def test_rng_out_of_range(self):
        state = LotteryState(manager, rng=lambda n: n)
        state.join(alice, MINIMUM_ENTRY)
        with self.assertRaises(ValueError):
            state.pick_winner(manager)
        self.assertEqual([alice], state.get_players())

    def test_new_round_after_settle(self):
        self.state.join(alice, MINIMUM_ENTRY)
        self.state.pick_winner(manager)
        self.state.join(carol, MINIMUM_ENTRY)
        self.assertEqual([carol], self.state.get_players())
        self.assertEqual(MINIMUM_ENTRY, self.state.balance)

    def test_custom_minimum(self):
        state = LotteryState(manager, minimum_entry=0)
        state.join(alice, 0)
        self.assertEqual([alice], state.get_players())
        with self.assertRaises(ValueError):
            LotteryState(manager, minimum_entry=-1)

    def test_identities_are_normalized(self):
        self.state.join(alice.val.lower(), MINIMUM_ENTRY)
        self.assertEqual([alice], self.state.get_players())
        self.state.pick_winner(manager.val.lower())

    @parameterized.expand([('float', 2e16), ('string', '20000000000000000'), ('none', None)])
    def test_join_requires_int_wei(self, _, payment):
        with self.assertRaises(ValueError):
            self.state.join(alice, payment)
        self.assertEqual([], self.state.get_players())
        self.assertEqual(0, self.state.balance)
        self.assertIsInstance(self.state.balance, int)
