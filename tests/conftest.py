"""
Pytest configuration and fixtures for Armor tests.

This module provides shared fixtures used across unit and integration tests.
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_yaml() -> str:
    """Return a config YAML using header-style keys."""
    return """
X-XSS-Protection: true
Referrer-Policy: same-origin
X-Frame-Options: DENY
hsts:
  maxAge: "31536000"
  includeSubDomains: true
  preload: false
expectCt:
  maxAge: "86400"
  enforce: true
  reportUri: https://example.com/report
X-DNS-Prefetch-Control: true
Content-Security-Policy: default-src 'self'
"""


@pytest.fixture
def minimal_config_yaml() -> str:
    """Return the smallest usable config: both directive groups, all defaults."""
    return """
hsts: {}
expectCt: {}
"""


@pytest.fixture
def incomplete_config_yaml() -> str:
    """Return a config that is missing the hsts group."""
    return """
X-Frame-Options: DENY
expectCt: {}
"""
