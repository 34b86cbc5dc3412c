from typing import Collection, Dict, Tuple, List, Union, Callable, Optional

from eth_utils import is_address, to_checksum_address


class Value(tuple):
    def __new__(cls, contents: Collection):
        return super(Value, cls).__new__(cls, contents)

    def __str__(self):
        return f'{type(self).__name__}({super().__str__()})'

    def __eq__(self, other):
        return isinstance(other, type(self)) and super().__eq__(other)

    def __hash__(self):
        return self[:].__hash__()

    @staticmethod
    def unwrap_values(v: Union[int, bool, 'Value', List, Dict]) -> Union[int, str, List, Dict]:
        if isinstance(v, List):
            return list(map(Value.unwrap_values, v))
        elif isinstance(v, AddressValue):
            return v.val
        elif isinstance(v, Dict):
            return {key: Value.unwrap_values(vals) for key, vals in v.items()}
        else:
            return list(v[:]) if isinstance(v, Value) else v

    @staticmethod
    def collection_to_string(v: Union[int, bool, 'Value', Dict, List, Tuple]) -> str:
        if isinstance(v, List):
            return f"[{', '.join(map(Value.collection_to_string, v))}]"
        elif isinstance(v, Tuple) and not isinstance(v, Value):
            return f"({', '.join(map(Value.collection_to_string, v))})"
        elif isinstance(v, Dict):
            return f"{{{', '.join([f'{key}: {Value.collection_to_string(val)}' for key, val in v.items()])}}}"
        else:
            return str(v)


class AddressValue(Value):
    """
    Account identity (EIP-55 checksum address).

    Two AddressValues are equal iff they refer to the same 20 byte address, regardless of the
    capitalization or encoding they were created from.
    """

    get_balance: Optional[Callable[['AddressValue'], int]] = None

    def __new__(cls, val: Union[str, int, bytes, 'AddressValue']):
        if isinstance(val, AddressValue):
            val = val.val
        elif isinstance(val, int):
            val = val.to_bytes(20, byteorder='big')
        if isinstance(val, bytes):
            val = '0x' + val.hex()
        if not is_address(val):
            raise ValueError(f'Invalid address {val!r}')
        return super(AddressValue, cls).__new__(cls, [to_checksum_address(val)])

    @property
    def val(self) -> str:
        return self[0]

    def __str__(self):
        return self.val

    def __repr__(self):
        return f'AddressValue({self.val})'

    @property
    def balance(self) -> int:
        """Balance of this account in wei, as reported by the active blockchain backend."""
        if self.get_balance is None:
            raise RuntimeError('No blockchain backend has been initialized')
        return self.get_balance(self)
