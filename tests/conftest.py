"""Pytest configuration for the base64 gadget tests."""

import sys
from pathlib import Path

import pytest

# Add the repository root to the path so absolute imports work
# (tests/ is inside the repository root, so parent is the root)
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from tests.helpers import SHA256_DIGEST_HEX  # noqa: E402


@pytest.fixture
def digest_bytes() -> bytes:
    return bytes.fromhex(SHA256_DIGEST_HEX)
