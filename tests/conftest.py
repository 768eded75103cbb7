# tests/conftest.py
"""
Global test bootstrap
- Quiet, file-less logging before the app package is imported
- Pulls in the shared fixtures (app, auth, store)
"""

from __future__ import annotations

import os

# ──────────────────────────────────────────────────────────────────────────────
# 🌱 Test env (set BEFORE importing the app so import-time config sees it)
# ──────────────────────────────────────────────────────────────────────────────
os.environ.setdefault("LOG_TO_FILE", "0")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("STORE_BACKEND", "memory")

import pytest  # noqa: E402

# ──────────────────────────────────────────────────────────────────────────────
# 📦 Shared fixtures
# ──────────────────────────────────────────────────────────────────────────────
from tests.fixtures.store import *   # noqa: F401,F403,E402
from tests.fixtures.auth import *    # noqa: F401,F403,E402
from tests.fixtures.app import *     # noqa: F401,F403,E402


@pytest.fixture(scope="session", autouse=True)
def anyio_backend():
    return "asyncio"
