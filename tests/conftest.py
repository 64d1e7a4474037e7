"""
pytest configuration for dns-overlay tests

This file ensures tests can find the dns_overlay module regardless of environment
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path so tests can import dns_overlay
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

# Shared fakes live next to this file
tests_dir = str(Path(__file__).parent)
if tests_dir not in sys.path:
    sys.path.insert(0, tests_dir)

from dns_overlay import registration  # noqa: E402
from dns_overlay.scope import isolated  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_scope():
    """Run every test in its own execution scope"""
    with isolated() as scope:
        yield scope


@pytest.fixture(autouse=True)
def restore_socket_resolver():
    yield
    registration.uninstall()
