import sys
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from bucket_queue.config import Config


@pytest.fixture(autouse=True)
def _restore_config():
    """Reset :class:`Config` after each test."""

    slots = Config.priority_slots
    logging_opts = dict(Config.logging)
    config_file = Config.config_file
    yield
    Config.priority_slots = slots
    Config.logging = logging_opts
    Config.config_file = config_file
