"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/: Services and HTTP apps against in-memory mocks
    - unit/     : Pure functions and single clients, no real I/O
    - contracts/: Test data factories per service
"""
import os
import sys

import pytest

# Set testing environment BEFORE any imports that read settings
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("ENVIRONMENT", "testing")

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from tests.contracts.campaign.data_contract import CampaignTestDataFactory
from tests.contracts.domain.data_contract import DomainTestDataFactory


@pytest.fixture
def domain_factory() -> DomainTestDataFactory:
    """Provide domain test data factory"""
    return DomainTestDataFactory()


@pytest.fixture
def campaign_factory() -> CampaignTestDataFactory:
    """Provide campaign test data factory"""
    return CampaignTestDataFactory()
