import threading
import time

import pytest

def wait_until(check, timeout: float = 2.0, interval: float = 0.005) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if check():
            return True
        time.sleep(interval)
    return check()

class Outcome:
    """Result or exception captured from a worker thread."""
    def __init__(self):
        self.value = None
        self.error = None
        self.finished = threading.Event()

def run_in_thread(fn, *args, **kwargs):
    outcome = Outcome()

    def target():
        try:
            outcome.value = fn(*args, **kwargs)
        except BaseException as e:  # handed back to the test
            outcome.error = e
        finally:
            outcome.finished.set()

    t = threading.Thread(target=target, daemon=True)
    t.start()
    return t, outcome

@pytest.fixture
def spawn():
    return run_in_thread
