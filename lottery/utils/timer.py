import contextlib
import time

from lottery import my_logging
from lottery.config import lt_print


@contextlib.contextmanager
def time_measure(key, should_print=False, skip=False):
    start = time.time()
    yield
    end = time.time()
    elapsed = end - start

    if not skip:
        if should_print:
            lt_print(f"Took {elapsed} s")
        my_logging.data("time_" + key, elapsed)
