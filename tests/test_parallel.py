import threading
import time

import pytest

from stfilters.errors import ValidationError
from stfilters.parallel import map_indexed, resolve_workers


def test_results_keep_index_order():
    def slow_for_low_indices(i):
        # Early indices finish last
        time.sleep(0.01 * (5 - i))
        return i * i

    assert map_indexed(slow_for_low_indices, 5, max_workers=5) == [0, 1, 4, 9, 16]


def test_single_worker_runs_inline():
    threads = set()

    def record(i):
        threads.add(threading.get_ident())
        return i

    assert map_indexed(record, 4, max_workers=1) == [0, 1, 2, 3]
    assert threads == {threading.get_ident()}


def test_errors_propagate():
    def fail_on_two(i):
        if i == 2:
            raise ValidationError("bad slit")
        return i

    with pytest.raises(ValidationError):
        map_indexed(fail_on_two, 4, max_workers=2)


def test_resolve_workers():
    assert resolve_workers(3) == 3
    assert resolve_workers(None) >= 1
    with pytest.raises(ValidationError):
        resolve_workers(0)


def test_zero_tasks():
    assert map_indexed(lambda i: i, 0) == []
