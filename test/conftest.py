"""
Pytest configuration for td-cmd tests.
"""
import os
import sys
from unittest.mock import MagicMock

import pytest
import requests

# Add the parent directory to sys.path so we can import td_cmd
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from td_cmd.client import TreasureDataClient
from test.config import API_KEY


@pytest.fixture
def session():
    """A mocked requests session; set request.return_value or side_effect."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    """A client bound to the mocked session."""
    return TreasureDataClient(API_KEY, session=session)
