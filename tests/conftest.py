"""Pytest configuration and fixtures shared across all test modules.

Environment defaults are set before any adgen import so the global settings
object is built from them.
"""

import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("LLM_PROVIDER", "sarvam")
os.environ.setdefault("LLM_MODEL", "sarvam-m")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("APP_RATE_LIMIT_STORE", "memory")
os.environ.setdefault("APP_RATE_LIMIT_REQUESTS", "10")
os.environ.setdefault("APP_RATE_LIMIT_WINDOW_SECONDS", "60")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from adgen.api.routes.ads import get_ad_service  # noqa: E402
from adgen.core.config import settings  # noqa: E402
from adgen.core.rate_limit import reset_rate_limiter  # noqa: E402
from adgen.main import app  # noqa: E402
from adgen.services.ad_service import AdService  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_rate_limiter():
    """Give every test an empty rate limit store."""
    reset_rate_limiter()
    yield
    reset_rate_limiter()


@pytest.fixture
def valid_ad_payload() -> dict[str, str]:
    return {
        "businessName": "Sharma Sweets",
        "businessType": "Sweet shop",
        "city": "Jaipur",
        "offer": "20% off on all mithai this Diwali",
        "language": "Hindi",
        "tone": "Festive",
    }


@pytest.fixture
def sample_ad_copy() -> dict[str, str]:
    return {
        "whatsapp": "Diwali special at Sharma Sweets! 20% off on all mithai.",
        "instagram": "Light up your Diwali with Sharma Sweets.",
        "poster_headline": "Diwali Dhamaka: 20% Off!",
        "hashtags": "#Diwali #Jaipur #SharmaSweets",
    }


@pytest.fixture
def mock_llm(sample_ad_copy) -> MagicMock:
    """LLM client stub returning a well-formed ad copy object."""
    llm = MagicMock()
    llm.generate_json = AsyncMock(return_value=dict(sample_ad_copy))
    return llm


@pytest.fixture
def client(mock_llm):
    """Test client with the upstream LLM replaced by ``mock_llm``."""
    app.dependency_overrides[get_ad_service] = lambda: AdService(
        llm=mock_llm, llm_settings=settings.llm
    )
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_ad_service, None)
