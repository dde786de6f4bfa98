"""
Shared fixtures for knewsnotifd tests.

Provides common test fixtures for use across all test modules.
"""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from knewsnotifd.config import AppConfig, FeedSettings, WebhookConfig
from knewsnotifd.models import Entry, ParsedFeed
from knewsnotifd.webhook import WebhookInfo

# Path to test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"

WEBHOOK_URL = "https://discord.com/api/webhooks/123/token"
FEED_URL = "https://example.com/kdist.xml"

T1 = datetime(2024, 10, 10, 8, 26, 30, tzinfo=timezone.utc)
T2 = datetime(2024, 10, 13, 21, 40, 54, tzinfo=timezone.utc)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def sample_rss_path(fixtures_dir: Path) -> Path:
    """Return path to the kernel.org style RSS feed."""
    return fixtures_dir / "kdist.xml"


@pytest.fixture
def sample_atom_path(fixtures_dir: Path) -> Path:
    """Return path to sample Atom feed file."""
    return fixtures_dir / "sample_atom.xml"


@pytest.fixture
def sample_config_path(fixtures_dir: Path) -> Path:
    """Return path to sample config file."""
    return fixtures_dir / "sample_config.yaml"


@pytest.fixture
def sample_rss_content(sample_rss_path: Path) -> bytes:
    """Return contents of the sample RSS feed."""
    return sample_rss_path.read_bytes()


@pytest.fixture
def sample_atom_content(sample_atom_path: Path) -> bytes:
    """Return contents of sample Atom feed."""
    return sample_atom_path.read_bytes()


@pytest.fixture
def webhook_env(monkeypatch: pytest.MonkeyPatch) -> str:
    """Set the webhook URL environment variable."""
    monkeypatch.setenv("KNEWSNOTIFD_WEBHOOK_URL", WEBHOOK_URL)
    return WEBHOOK_URL


@pytest.fixture
def webhook_config() -> WebhookConfig:
    """Create a webhook configuration with no pacing delay."""
    return WebhookConfig(url=WEBHOOK_URL, send_delay=0)


@pytest.fixture
def app_config(tmp_path: Path, webhook_config: WebhookConfig) -> AppConfig:
    """Create an app configuration with the snapshot in a temp dir."""
    return AppConfig(
        webhook=webhook_config,
        feed=FeedSettings(
            url=FEED_URL,
            snapshot_path=str(tmp_path / "kernel.xml"),
            check_interval=60,
        ),
    )


@pytest.fixture
def make_entry():
    """Return a factory for feed entries."""

    def _make_entry(
        title: str = "6.11.3: stable",
        summary: str = "No changelog here",
        published: datetime | None = T1,
    ) -> Entry:
        return Entry(title=title, summary=summary, published=published)

    return _make_entry


@pytest.fixture
def make_feed():
    """Return a factory for parsed feeds."""

    def _make_feed(updated: datetime | None, *entries: Entry) -> ParsedFeed:
        return ParsedFeed(updated=updated, entries=tuple(entries), title="kernel.org")

    return _make_feed


@pytest.fixture
def mock_webhook_client() -> MagicMock:
    """
    Create a mock webhook client.

    Returns
    -------
    MagicMock
        A mock with the WebhookClient methods mocked.
    """
    client = MagicMock()
    client.get_information = AsyncMock(
        return_value=WebhookInfo(id="123", name="releases")
    )
    client.send = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
async def broken_socks_proxy():
    """
    Serve a SOCKS endpoint that answers every handshake with garbage.

    Yields
    ------
    str
        Proxy URL pointing at the local endpoint.
    """

    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        await reader.read(16)
        writer.write(b"\x99\x00")
        await writer.drain()
        writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]

    yield f"socks5://127.0.0.1:{port}"

    server.close()
    await server.wait_closed()
