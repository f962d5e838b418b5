"""
Pytest configuration and fixtures for cp750 tests.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent))

from cp750 import CP750Client  # noqa: E402
from device_stub import DeviceStub  # noqa: E402


@pytest.fixture
def device():
    """A fake processor listening on an ephemeral localhost port."""
    stub = DeviceStub()
    yield stub
    stub.stop()


@pytest.fixture
def client(device):
    cp750 = CP750Client("127.0.0.1", device.port, timeout=2.0)
    yield cp750
    cp750.close()
