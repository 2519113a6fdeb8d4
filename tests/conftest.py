"""Pytest configuration and shared fixtures."""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

from tiempo_real.config import Settings  # noqa: E402
from tiempo_real.factory import crear_componentes  # noqa: E402
from tests.fakes import FakeConnectionStore, FakePushClient  # noqa: E402


@pytest.fixture
def store():
    return FakeConnectionStore()


@pytest.fixture
def push_client():
    return FakePushClient()


@pytest.fixture
def settings():
    return Settings(
        connections_table="connections-test",
        ws_api_endpoint="https://example.execute-api.us-east-1.amazonaws.com/test",
        broadcast_max_workers=4,
        broadcast_timeout_seconds=5,
    )


@pytest.fixture
def componentes(store, push_client, settings):
    """Componentes reales cableados sobre el store y el cliente en memoria."""
    return crear_componentes(settings=settings, store=store, client=push_client)
