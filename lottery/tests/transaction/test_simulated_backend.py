from lottery.config import cfg
from lottery.errors.exceptions import InsufficientPayment, Unauthorized, NoPlayers
from lottery.state import ETHER, MINIMUM_ENTRY
from lottery.tests.lottery_unit_test import LotteryTestCase
from lottery.transaction.blockchain.simulated import initial_account_balance
from lottery.transaction.interface import IntegrityError, BlockChainError, TransactionFailedException
from lottery.transaction.offchain import LotteryContract
from lottery.transaction.runtime import Runtime
from lottery.transaction.types import AddressValue


class TestSimulatedBackend(LotteryTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.old_backend = cfg.blockchain_backend
        cfg.blockchain_backend = 'simulated'
        Runtime.reset()
        self.chain = Runtime.blockchain()
        self.manager, self.alice, self.bob = LotteryContract.create_dummy_accounts(3)

    def tearDown(self) -> None:
        cfg.blockchain_backend = self.old_backend
        Runtime.reset()
        super().tearDown()

    def deploy(self) -> LotteryContract:
        return LotteryContract.deploy(user=self.manager)

    def test_is_debug_backend(self):
        self.assertTrue(self.chain.is_debug_backend())

    def test_dummy_accounts_are_funded(self):
        for acc in [self.manager, self.alice, self.bob]:
            self.assertEqual(initial_account_balance, acc.balance)
        self.assertEqual(3, len({self.manager, self.alice, self.bob}))

    def test_dummy_accounts_exhausted(self):
        with self.assertRaises(ValueError):
            LotteryContract.create_dummy_accounts(100)

    def test_deploy(self):
        lottery = self.deploy()
        self.assertEqual(self.manager, lottery.manager())
        self.assertEqual(MINIMUM_ENTRY, lottery.minimum_entry())
        self.assertEqual(0, lottery.balance)
        self.assertNotEqual(lottery.address, self.deploy().address)

    def test_deploy_with_value(self):
        with self.assertRaises(TransactionFailedException):
            LotteryContract.deploy(user=self.manager, wei_amount=1)

    def test_specific_rejections(self):
        lottery = self.deploy()
        alice = LotteryContract.connect(lottery.address, user=self.alice)
        with self.assertRaises(InsufficientPayment):
            alice.enter(MINIMUM_ENTRY - 1)
        with self.assertRaises(NoPlayers):
            lottery.pick_winner()
        alice.enter(MINIMUM_ENTRY)
        with self.assertRaises(Unauthorized):
            alice.pick_winner()
        self.assertEqual([self.alice], lottery.get_players())

    def test_rejected_entry_keeps_funds(self):
        lottery = self.deploy()
        with self.assertRaises(InsufficientPayment):
            lottery.enter(1)
        self.assertEqual(initial_account_balance, self.manager.balance)

    def test_negative_value(self):
        lottery = self.deploy()
        with self.assertRaises(ValueError):
            lottery.enter(-1)

    def test_float_value(self):
        lottery = self.deploy()
        with self.assertRaises(ValueError):
            lottery.enter(float(MINIMUM_ENTRY))
        self.assertEqual([], lottery.get_players())
        self.assertEqual(initial_account_balance, self.manager.balance)

    def test_insufficient_funds(self):
        lottery = self.deploy()
        with self.assertRaises(BlockChainError):
            lottery.enter(initial_account_balance + 1)
        self.assertEqual([], lottery.get_players())

    def test_deterministic_winner(self):
        self.chain.rng = lambda n: 1
        lottery = self.deploy()
        LotteryContract.connect(lottery.address, user=self.alice).enter(MINIMUM_ENTRY)
        LotteryContract.connect(lottery.address, user=self.bob).enter(3 * MINIMUM_ENTRY)
        lottery.pick_winner()
        self.assertEqual(initial_account_balance - MINIMUM_ENTRY, self.alice.balance)
        self.assertEqual(initial_account_balance + MINIMUM_ENTRY, self.bob.balance)
        self.assertEqual(0, lottery.balance)
        self.assertEqual([], lottery.get_players())

    def test_payout_is_exact(self):
        lottery = self.deploy()
        bob = LotteryContract.connect(lottery.address, user=self.bob)
        bob.enter(2 * ETHER)
        before = self.bob.balance
        lottery.pick_winner()
        self.assertEqual(2 * ETHER, self.bob.balance - before)

    def test_players_by_index(self):
        lottery = self.deploy()
        lottery.enter(MINIMUM_ENTRY)
        self.assertEqual(self.manager, AddressValue(lottery.api.call('players', [0])))
        with self.assertRaises(BlockChainError):
            lottery.api.call('players', [1])

    def test_unknown_function(self):
        lottery = self.deploy()
        with self.assertRaises(BlockChainError):
            lottery.api.transact('withdraw', [])
        with self.assertRaises(BlockChainError):
            lottery.api.call('owner', [])

    def test_connect_unknown_address(self):
        with self.assertRaises(IntegrityError):
            LotteryContract.connect(self.alice, user=self.bob)

    def test_receipt(self):
        lottery = self.deploy()
        receipt = lottery.enter(MINIMUM_ENTRY)
        self.assertEqual(1, receipt['status'])
        self.assertEqual(self.manager.val, receipt['from'])

    def test_default_address(self):
        old = cfg.blockchain_default_account
        try:
            cfg.blockchain_default_account = None
            self.assertIsNone(LotteryContract.default_address())
            with self.assertRaises(ValueError):
                LotteryContract.deploy()
            cfg.blockchain_default_account = 0
            self.assertEqual(AddressValue(self.chain.accounts[0]), LotteryContract.default_address())
            self.assertEqual(LotteryContract.default_address(), LotteryContract.deploy().manager())
        finally:
            cfg.blockchain_default_account = old
