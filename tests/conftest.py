import os

import pytest

# GUI tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from debug_console import log_store as log_store_module
from debug_console.log_store import LogStore


@pytest.fixture(autouse=True)
def isolated_default_store(tmp_path):
    """Keep the process-wide store and its load path away from the working directory."""
    previous_path = log_store_module.get_load_path()
    log_store_module.set_default_store(None)
    log_store_module.set_load_path(str(tmp_path / "default_debug_console.log"))
    yield
    log_store_module.set_default_store(None)
    log_store_module.set_load_path(previous_path)


@pytest.fixture
def store():
    return LogStore()


@pytest.fixture
def recorder():
    """An observer that keeps every snapshot it receives."""
    class Recorder:
        def __init__(self):
            self.snapshots = []

        def __call__(self, snapshot):
            self.snapshots.append(snapshot)

        @property
        def messages(self):
            return [[entry.text for entry in snapshot] for snapshot in self.snapshots]

    return Recorder()
