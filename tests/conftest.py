from pathlib import Path
import sys
from typing import List

import pytest
from loguru import logger

# Ensure project root is importable when running tests directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rolling_token.clock import FixedClock  # noqa: E402


# first second of a 30s slot (1700000010)
SLOT_START = 56666667 * 30


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(SLOT_START)


@pytest.fixture
def log_messages():
    messages: List[str] = []
    sink_id = logger.add(lambda m: messages.append(m.record["level"].name + " " + m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(sink_id)
