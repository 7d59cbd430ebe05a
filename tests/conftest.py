"""
Shared pytest fixtures for PR history tests.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from datetime import timedelta

import pytest

from tests.fakes import T0, FakeGitHubClient


@pytest.fixture
def fake_client():
    return FakeGitHubClient()


@pytest.fixture
def since_five_days():
    return T0 - timedelta(days=5)
