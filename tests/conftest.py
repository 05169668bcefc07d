"""
Pytest configuration and fixtures for PayWay relay tests.
"""

import os
import sys
from datetime import datetime, timezone

import pytest

# Add app directory to Python path for imports
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.append(ROOT_DIR)
sys.path.append(os.path.join(ROOT_DIR, "app"))

from config import Settings  # noqa: E402
from adapters.payway.builder import PaymentRequestBuilder  # noqa: E402
from adapters.payway.transaction import TransactionIdGenerator  # noqa: E402

MERCHANT_ID = "ec461963"
API_KEY = "test-api-key"
FIXED_NOW = datetime(2025, 3, 14, 9, 26, 53, tzinfo=timezone.utc)


def make_settings(**overrides) -> Settings:
    values = {
        "PAYWAY_MERCHANT_ID": MERCHANT_ID,
        "PAYWAY_API_KEY": API_KEY,
        "PAYWAY_API_URL": "https://gateway.test/purchase",
        "FRONTEND_URL": "https://shop.test",
        "BACKEND_URL": "https://api.shop.test",
        "CORS_ORIGINS": ["https://shop.test"],
        "GATEWAY_TIMEOUT": 2.0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    """Settings for a single test merchant."""
    return make_settings()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def id_generator(fixed_clock):
    return TransactionIdGenerator(clock=fixed_clock, node=7)


@pytest.fixture
def builder(settings, id_generator, fixed_clock):
    return PaymentRequestBuilder(settings, id_generator=id_generator, clock=fixed_clock)


@pytest.fixture
def test_items():
    return [{"name": "Test Product", "quantity": 1, "price": 1.00}]
