import contextlib
from typing import List

full_log_context: List = []


@contextlib.contextmanager
def log_context(*keys: str):
    full_log_context.extend(keys)
    try:
        yield
    finally:
        del full_log_context[len(full_log_context) - len(keys):]
