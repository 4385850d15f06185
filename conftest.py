# Ensure project root is on sys.path so 'twitch_chat' and 'tests' are importable
# when running pytest from environments that don't automatically include it.
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.resolve()
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def reset_error_aggregator():
    """Clear recorded errors after each test so counts never leak between tests."""
    yield
    from twitch_chat.logging_config import error_aggregator

    error_aggregator.reset()
