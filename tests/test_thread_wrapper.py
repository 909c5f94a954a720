import threading

import pytest

from globesim.logger import Logger
from globesim.thread_wrapper import ThreadWrapper


def test_start_runs_function_with_arguments():
    results = []
    wrapper = ThreadWrapper()
    wrapper.start(lambda a, b=0: results.append(a + b), 2, b=3)
    wrapper.join()
    assert results == [5]
    assert wrapper.is_running() is False


def test_is_running_until_joined():
    gate = threading.Event()
    wrapper = ThreadWrapper()
    wrapper.start(gate.wait)
    assert wrapper.is_running() is True
    gate.set()
    wrapper.stop()
    assert wrapper.is_running() is False


def test_start_twice_raises():
    gate = threading.Event()
    wrapper = ThreadWrapper()
    wrapper.start(gate.wait)
    with pytest.raises(RuntimeError):
        wrapper.start(lambda: None)
    gate.set()
    wrapper.join()


def test_can_restart_after_join():
    results = []
    wrapper = ThreadWrapper()
    wrapper.start(results.append, 1)
    wrapper.join()
    wrapper.start(results.append, 2)
    wrapper.join()
    assert results == [1, 2]


def test_start_is_logged():
    logger = Logger()
    wrapper = ThreadWrapper(logger)
    wrapper.start(lambda: None)
    wrapper.join()
    entries = logger.entries()
    assert len(entries) == 1
    assert entries[0].startswith("I")
    assert entries[0].endswith("Starting thread!")


def test_stop_without_start_keeps_not_running():
    wrapper = ThreadWrapper()
    wrapper.stop()
    assert wrapper.is_running() is False