import io
from contextlib import redirect_stdout

from lottery.__main__ import main, parse_arguments
from lottery.config import cfg
from lottery.tests.lottery_unit_test import LotteryTestCase
from lottery.transaction.runtime import Runtime


class TestCommandLine(LotteryTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.old_backend = cfg.blockchain_backend
        self.old_account = cfg.blockchain_default_account
        self.old_node_uri = cfg.blockchain_node_uri
        Runtime.reset()

    def tearDown(self) -> None:
        cfg.blockchain_backend = self.old_backend
        cfg.blockchain_default_account = self.old_account
        cfg.blockchain_node_uri = self.old_node_uri
        Runtime.reset()
        super().tearDown()

    def run_main(self, *argv: str) -> str:
        out = io.StringIO()
        with redirect_stdout(out):
            main(['--config-file', 'lottery-missing-config.json', *argv])
        return out.getvalue()

    def test_parse_enter(self):
        a = parse_arguments(['enter', '0xabc', '--value', '0.02', '--blockchain-backend', 'simulated'])
        self.assertEqual('enter', a.cmd)
        self.assertEqual('0xabc', a.address)
        self.assertEqual('0.02', a.value)
        self.assertEqual('simulated', a.blockchain_backend)

    def test_parse_invalid_backend(self):
        with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit):
            parse_arguments(['deploy', '--blockchain-backend', 'abacus'])

    def test_scenario(self):
        out = self.run_main('scenario', 'single_entry', 'empty_round', '--blockchain-backend', 'simulated')
        self.assertIn('ok   single_entry', out)
        self.assertIn('ok   empty_round', out)

    def test_unknown_scenario(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_main('scenario', 'no_such_scenario', '--blockchain-backend', 'simulated')
        self.assertEqual(1, ctx.exception.code)

    def test_interaction_on_simulated_chain(self):
        # the runtime persists between main invocations within one process
        out = self.run_main('deploy', '--blockchain-backend', 'simulated')
        address = out.split('Deployed Lottery at: ')[1].split()[0]
        self.run_main('enter', address, '--value', '0.02', '--blockchain-backend', 'simulated')
        out = self.run_main('players', address, '--blockchain-backend', 'simulated')
        self.assertIn(str(Runtime.blockchain().default_address), out)
        out = self.run_main('balance', address, '--blockchain-backend', 'simulated')
        self.assertIn(str(2 * 10 ** 16), out)

    def test_rejected_entry_exit_code(self):
        out = self.run_main('deploy', '--blockchain-backend', 'simulated')
        address = out.split('Deployed Lottery at: ')[1].split()[0]
        with self.assertRaises(SystemExit) as ctx:
            self.run_main('enter', address, '--value', '0.01', '--blockchain-backend', 'simulated')
        self.assertEqual(3, ctx.exception.code)

    def test_unknown_contract_exit_code(self):
        Runtime.reset()
        with self.assertRaises(SystemExit) as ctx:
            self.run_main('players', '0x' + '12' * 20, '--blockchain-backend', 'simulated')
        self.assertEqual(13, ctx.exception.code)

    def test_invalid_value_exit_code(self):
        out = self.run_main('deploy', '--blockchain-backend', 'simulated')
        address = out.split('Deployed Lottery at: ')[1].split()[0]
        with self.assertRaises(SystemExit) as ctx:
            self.run_main('enter', address, '--value', 'lots', '--blockchain-backend', 'simulated')
        self.assertEqual(1, ctx.exception.code)

    def test_unreachable_node_exit_code(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_main('deploy', '--blockchain-backend', 'w3-http', '--blockchain-node-uri', 'http://127.0.0.1:1')
        self.assertEqual(12, ctx.exception.code)

    def test_shell_unreachable_node_exit_code(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_main('shell', '--blockchain-backend', 'w3-http', '--blockchain-node-uri', 'http://127.0.0.1:1')
        self.assertEqual(12, ctx.exception.code)

    def test_scenario_requires_debug_backend(self):
        from web3 import Web3, EthereumTesterProvider
        cfg.blockchain_node_uri = Web3(EthereumTesterProvider())
        with self.assertRaises(SystemExit) as ctx:
            self.run_main('scenario', 'single_entry', '--blockchain-backend', 'w3-custom')
        self.assertEqual(1, ctx.exception.code)
