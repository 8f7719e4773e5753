"""Global pytest fixtures.
 - Sets env vars to disable logging side effects (rotating file log, JSONL events).
 - Shrinks timing heuristics so convergence tests run in milliseconds.
"""
from __future__ import annotations
import os
import sys
import pathlib
import pytest

# Add project root and this directory (for the fakes helper module) to sys.path
ROOT = pathlib.Path(__file__).resolve().parents[2]
for p in (ROOT, pathlib.Path(__file__).resolve().parent):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


@pytest.fixture(autouse=True, scope="session")
def test_env_setup():
    os.environ.setdefault('SCRAPER_DISABLE_FILE_LOGS', '1')
    os.environ.setdefault('SCRAPER_DISABLE_EVENTS', '1')
    os.environ.setdefault('SCRAPER_SETTLE_MS', '0')
    os.environ.setdefault('SCRAPER_LOAD_DELAY_MS', '0')
    yield
    # teardown not required


@pytest.fixture
def settings(tmp_path):
    from fakes import make_settings
    return make_settings(tmp_path)


@pytest.fixture
def launcher():
    from fakes import FakeLauncher
    return FakeLauncher()


@pytest.fixture
def diagnostics():
    from fakes import RecordingDiagnostics
    return RecordingDiagnostics()
