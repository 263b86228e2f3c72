"""Pytest configuration and fixtures."""

from typing import AsyncGenerator, Iterable

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from linkstore.persistence import SnapshotFile
from linkstore.service import LinkShortenerService
from linkstore.shortcode import ShortCodeGenerator
from linkstore.store import LinkStore
from linkstore.common.logging_config import setup_logging
from web_app import create_app


class ScriptedRandom:
    """Stand-in for random.Random whose choices() returns predetermined codes in order."""

    def __init__(self, codes: Iterable[str]):
        self._codes = iter(codes)

    def choices(self, population, weights=None, *, cum_weights=None, k=1):
        return list(next(self._codes))


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def snapshot_path(tmp_path):
    """Location of the snapshot file for one test."""
    return str(tmp_path / "data" / "links.json")


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def scripted_generator():
    """Factory for generators that hand out the given codes in order."""
    def make(*codes: str) -> ShortCodeGenerator:
        return ShortCodeGenerator(default_length=6, rng=ScriptedRandom(codes))
    return make


@pytest.fixture
def store(snapshot_path, short_code_generator, logger) -> LinkStore:
    """Create an empty store backed by a temporary snapshot."""
    link_store = LinkStore(
        snapshot=SnapshotFile(snapshot_path),
        short_code_generator=short_code_generator,
        logger=logger,
    )
    link_store.load()
    return link_store


@pytest.fixture
def service(store, logger) -> LinkShortenerService:
    """Create service instance without background saving."""
    return LinkShortenerService(store=store, logger=logger)


@pytest.fixture
def config(snapshot_path) -> Config:
    """Configuration pointing at the temporary snapshot."""
    return Config(
        data_file=snapshot_path,
        base_url="http://testserver",
    )


@pytest.fixture
def app(service, config):
    """Create test FastAPI app."""
    return create_app(
        service_instance=service,
        config=config,
    )


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
