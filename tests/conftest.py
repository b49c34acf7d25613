"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from fincalc.main import app
from fincalc.services.email import get_email_service
from fincalc.services.subscribers import SubscriberStore, get_subscriber_store


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture(scope="session")
def anyio_backend():
    """Backend for async tests."""
    return "asyncio"


class RecordingEmailService:
    """Stands in for SendGrid and remembers what would have been sent."""

    def __init__(self):
        self.sent = []

    def send_subscription_email(self, to_email, source=None, page_path=None):
        self.sent.append({"to": to_email, "source": source, "path": page_path})
        return True


@pytest.fixture
def subscribers_file(tmp_path):
    """Path of a per-test subscriber file (not created yet)."""
    return tmp_path / "data" / "subscribers.json"


@pytest.fixture
def subscriber_store(subscribers_file):
    """Store backed by the per-test file."""
    return SubscriberStore(str(subscribers_file))


@pytest.fixture
def email_outbox():
    """Recorded subscription emails."""
    return RecordingEmailService()


@pytest.fixture
def client(subscriber_store, email_outbox):
    """Test client with storage and email pointed at test doubles."""
    app.dependency_overrides[get_subscriber_store] = lambda: subscriber_store
    app.dependency_overrides[get_email_service] = lambda: email_outbox
    yield TestClient(app)
    app.dependency_overrides.clear()
