"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from app.main import app
from app.calculations.amortization import LoanTerms


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def standard_loan():
    """$300k at 6% over 30 years."""
    return LoanTerms(principal=300000, annual_rate_percent=6.0, term_years=30)


@pytest.fixture
def rent_vs_buy_inputs():
    """Baseline rent vs buy scenario."""
    return dict(
        home_price=400000,
        down_payment=80000,
        annual_rate_percent=6.5,
        monthly_rent=2200,
        term_years=30,
        property_tax=4800,
        insurance=1500,
        maintenance=4000,
        hoa_fees=0,
        home_appreciation=3.0,
        rent_increase=3.0,
        renters_insurance=200,
        investment_return=7.0,
        time_horizon=10,
        tax_bracket=24.0,
    )
