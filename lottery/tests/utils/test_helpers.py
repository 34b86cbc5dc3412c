import os
import tempfile

from lottery.contracts import lottery_sol, get_lottery_contract_code, revert_reasons
from lottery.tests.lottery_unit_test import LotteryTestCase
from lottery.transaction.types import AddressValue, Value
from lottery.utils.helpers import get_contract_names, save_to_file, read_file, get_code_error_msg


class TestHelpers(LotteryTestCase):

    def test_contract_names(self):
        self.assertEqual(['Lottery'], get_contract_names(lottery_sol))

    def test_save_and_read(self):
        with tempfile.TemporaryDirectory() as d:
            target = save_to_file(d, 'Lottery.abi', '[]')
            self.assertEqual(os.path.join(d, 'Lottery.abi'), target)
            self.assertEqual('[]', read_file(target))

    def test_code_error_msg(self):
        msg = get_code_error_msg(2, 3, ['first', 'second'])
        self.assertEqual('At line: 2;3\nsecond\n--/', msg)

    def test_code_error_msg_out_of_range(self):
        for line in [0, 3]:
            with self.assertRaises(ValueError):
                get_code_error_msg(line, 1, ['first', 'second'])

    def test_revert_reasons_in_contract(self):
        code = get_lottery_contract_code()
        for reason in revert_reasons:
            self.assertIn(f'"{reason}"', code)


class TestAddressValue(LotteryTestCase):
    checksummed = '0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed'

    def test_normalization(self):
        self.assertEqual(AddressValue(self.checksummed), AddressValue(self.checksummed.lower()))
        self.assertEqual(self.checksummed, AddressValue(self.checksummed.lower()).val)
        self.assertEqual(self.checksummed, str(AddressValue(self.checksummed)))

    def test_from_bytes_and_int(self):
        self.assertEqual(AddressValue(bytes(19) + b'\x01'), AddressValue(1))
        self.assertEqual(AddressValue(AddressValue(1)), AddressValue(1))

    def test_hashable(self):
        self.assertEqual(1, len({AddressValue(self.checksummed), AddressValue(self.checksummed.lower())}))

    def test_invalid(self):
        with self.assertRaises(ValueError):
            AddressValue('0x1234')

    def test_unwrap(self):
        addr = AddressValue(self.checksummed)
        self.assertEqual([self.checksummed, 5], Value.unwrap_values([addr, 5]))
        self.assertEqual(f'[{self.checksummed}, 5]', Value.collection_to_string([addr, 5]))
