"""
Component Test Layer Configuration

Structure:
    tests/component/
    ├── domain/    DomainService and domain API with mocked repository, DNS, certbot
    └── campaign/  CampaignService and campaign API with mocked repository, email provider

Usage:
    pytest tests/component -v
    pytest tests/component/domain -v
"""
import os
import sys

# Set testing environment BEFORE any imports
os.environ["ENV"] = "testing"
os.environ["ENVIRONMENT"] = "testing"

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))


def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "component: marks tests as component tests"
    )
