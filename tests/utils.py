import sys
from contextlib import contextmanager
from io import StringIO
from typing import Iterator, Tuple


@contextmanager
def captured_output() -> Iterator[Tuple[StringIO, StringIO]]:
    """Captures what is written to stdout and stderr"""
    new_out, new_err = StringIO(), StringIO()
    old_out, old_err = sys.stdout, sys.stderr
    try:
        sys.stdout, sys.stderr = new_out, new_err
        yield sys.stdout, sys.stderr
    finally:
        sys.stdout, sys.stderr = old_out, old_err
