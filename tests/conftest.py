import sys
from pathlib import Path

# Ensure the project's src directory is on sys.path for tests
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))
sys.path.insert(0, str(ROOT))

import pytest

from contactgate.domain.submission import SubmissionRequest
from contactgate.infrastructure.email.mock import MockDeliverer
from contactgate.infrastructure.stores import InMemoryTokenStore, SlidingWindowRateLimiter
from contactgate.services.submission_service import SubmissionService
from tests.fixtures.clock import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_store(clock):
    return InMemoryTokenStore(clock=clock)


@pytest.fixture
def rate_limiter(clock):
    return SlidingWindowRateLimiter(clock=clock)


@pytest.fixture
def deliverer():
    return MockDeliverer()


@pytest.fixture
def service(token_store, rate_limiter, deliverer):
    return SubmissionService(token_store, rate_limiter, deliverer)


@pytest.fixture
def test_app():
    """Yield an app namespace (`.app`, `.deliverer`) with default gate limits."""
    # Lazy import so module-level settings aren't built before sys.path is set
    from tests.fixtures.app_factory import create_test_app

    yield create_test_app()


def valid_request(owner_key: str = "203.0.113.7", token_id: str = "", **fields) -> SubmissionRequest:
    """Build a submission that passes validation unless fields override it."""
    data = {
        "email": "a@b.com",
        "subject": "Hi",
        "message": "Hello",
        "reason": "General",
    }
    data.update(fields)
    return SubmissionRequest(client_identity=owner_key, token_id=token_id, **data)


@pytest.fixture
def anyio_backend():
    """The app is asyncio-only (asyncio.Lock etc.); don't run anyio tests on trio."""
    return "asyncio"
