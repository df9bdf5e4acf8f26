from __future__ import annotations

import logging
import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for path in (SRC, ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from gemini_bridge.core.adapters import DemoAdapter  # noqa: E402


@pytest.fixture
def demo_adapter() -> DemoAdapter:
    """Demo adapter with a fixed seed and no simulated latency."""

    return DemoAdapter(rng=random.Random(7), response_delay=0.0, word_delay=0.0)


@pytest.fixture
def bridge_logger() -> logging.Logger:
    logger = logging.getLogger("tests.gemini_bridge")
    logger.setLevel(logging.DEBUG)
    return logger
