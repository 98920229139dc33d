# === NAVMAP v1 ===
# {
#   "module": "tests.conftest",
#   "purpose": "Shared pytest configuration for suite",
#   "sections": []
# }
# === /NAVMAP ===

"""
Pytest Configuration

Puts ``src`` on ``sys.path`` so the suite runs against the working tree
without an editable install, and keeps library debug logging visible in
failure reports.

Usage:
    pytest tests/cache_headers
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def _cache_headers_debug_logging(caplog: pytest.LogCaptureFixture) -> None:
    """Capture debug records emitted by the CacheHeaders loggers."""

    caplog.set_level(logging.DEBUG, logger="CacheHeaders")
