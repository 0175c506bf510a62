"""Pytest configuration and fixtures."""

import pytest
from datetime import datetime, timedelta, timezone
from httpx import ASGITransport, AsyncClient

from config import Config
from shortlinks.service import LinkService
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.store.memory import InMemoryClickLog, InMemoryLinkStore
from shortlinks.common.logging_config import setup_logging
from web_app import create_app


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def link_store(logger):
    return InMemoryLinkStore(stripes=8, logger=logger)


@pytest.fixture
def click_log(logger):
    return InMemoryClickLog(stripes=8, logger=logger)


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def service(link_store, click_log, short_code_generator, logger, clock) -> LinkService:
    """Create service instance on a fake clock."""
    return LinkService(
        link_store=link_store,
        click_log=click_log,
        short_code_generator=short_code_generator,
        logger=logger,
        clock=clock,
    )


@pytest.fixture
def config():
    return Config(base_url="http://testserver")


@pytest.fixture
def app(service, config):
    """Create test FastAPI app (no reaper; tests drive expiry with the clock)."""
    return create_app(service_instance=service, config=config)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "http://stackoverflow.com/questions/123456",
    ]
