"""
Main entry point for knewsnotifd.

Runs the poll loop that syncs the kernel.org feed and posts
notifications for new releases.
"""

import argparse
import asyncio
import logging
import signal
import sys
from datetime import timedelta
from urllib.parse import urlparse

import coloredlogs

from knewsnotifd import __author__, __version__
from knewsnotifd.config import AppConfig, load_config
from knewsnotifd.diff import diff_feed
from knewsnotifd.errors import ConfigError, DeliveryError, FetchError, ParseError, ReachabilityError
from knewsnotifd.fetcher import FeedFetcher
from knewsnotifd.models import PollState
from knewsnotifd.notifier import Notifier
from knewsnotifd.rss_parser import FeedParser
from knewsnotifd.snapshot import FeedSnapshot
from knewsnotifd.webhook import DiscordWebhook

logger = logging.getLogger(__name__)


def redact_proxy_url(proxy_url: str) -> str:
    """
    Redact credentials from a proxy URL for safe logging.

    Parameters
    ----------
    proxy_url : str
        The proxy URL potentially containing credentials.

    Returns
    -------
    str
        The proxy URL with password redacted.
    """
    try:
        parsed = urlparse(proxy_url)
        if parsed.password:
            netloc = parsed.hostname or ""
            if parsed.port:
                netloc = f"{netloc}:{parsed.port}"
            if parsed.username:
                netloc = f"{parsed.username}:****@{netloc}"
            return f"{parsed.scheme}://{netloc}{parsed.path}"
        return proxy_url
    except ValueError:
        return "<proxy url>"


class KNewsNotifier:
    """
    Kernel release notifier.

    Owns the poll state and drives fetch, parse, diff and notify
    on a fixed interval.
    """

    def __init__(self, config: AppConfig):
        """
        Initialize the notifier daemon.

        Parameters
        ----------
        config : AppConfig
            Validated application configuration.
        """
        self.config = config
        self.fetcher: FeedFetcher | None = None
        self.parser: FeedParser | None = None
        self.webhook: DiscordWebhook | None = None
        self.notifier: Notifier | None = None
        self.state = PollState()
        self._running = False

    def _create_components(self) -> Notifier:
        feed = self.config.feed
        proxy_url = feed.proxy
        if proxy_url:
            logger.info("Using proxy: %s", redact_proxy_url(proxy_url))

        snapshot = FeedSnapshot(feed.snapshot_path)
        self.fetcher = FeedFetcher(
            feed.url,
            snapshot,
            timeout=feed.request_timeout,
            user_agent=feed.user_agent,
            proxy_url=proxy_url,
        )
        self.parser = FeedParser(snapshot)
        self.webhook = DiscordWebhook(
            self.config.webhook.url,
            timeout=feed.request_timeout,
            user_agent=feed.user_agent,
            proxy_url=proxy_url,
        )
        self.notifier = Notifier(self.webhook, self.config.webhook)
        return self.notifier

    async def start(self) -> None:
        """Start the daemon and poll until stopped."""
        logger.info("knewsnotifd %s by %s", __version__, __author__)
        notifier = self._create_components()

        logger.info("Attempting to access webhook")
        try:
            info = await notifier.check_reachable()
        except ReachabilityError as e:
            logger.error("Could not contact webhook: %s", e)
            await self.stop()
            sys.exit(1)

        logger.info("Webhook accessed successfully: %s", info.name or info.id)

        try:
            await notifier.send_online(__version__)
        except DeliveryError as e:
            logger.error("Failed to send online notification: %s", e)

        self.state = PollState()
        self._running = True
        await self._poll_forever()

    async def stop(self) -> None:
        """Stop polling and close HTTP sessions."""
        logger.info("Stopping knewsnotifd")
        self._running = False

        if self.fetcher:
            await self.fetcher.close()
        if self.webhook:
            await self.webhook.close()

        logger.info("knewsnotifd stopped")

    async def _poll_forever(self) -> None:
        """Run a cycle now, then once per check interval."""
        interval = self.config.feed.check_interval

        while self._running:
            logger.info("Syncing RSS feed...")
            try:
                self.state = await self.run_cycle(self.state)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("Unexpected error during poll cycle: %s", e)

            if not self._running:
                break

            logger.info("Resyncing RSS feed in %s", timedelta(seconds=interval))
            await asyncio.sleep(interval)

    async def run_cycle(self, state: PollState) -> PollState:
        """
        Run one sync and notify cycle.

        Parameters
        ----------
        state : PollState
            State at the start of the cycle.

        Returns
        -------
        PollState
            State for the next cycle. Unchanged when the sync failed.
        """
        if not self.fetcher or not self.parser or not self.notifier:
            raise RuntimeError("Components not initialized")

        try:
            await self.fetcher.sync()
        except FetchError as e:
            logger.error("Failed to sync RSS feed: %s", e)
            return state

        try:
            feed = self.parser.parse_snapshot()
        except ParseError as e:
            logger.error("Failed to parse local RSS feed: %s", e)
            return state

        logger.info(
            "RSS feed synced successfully: %s (%d entries)",
            feed.title or self.config.feed.url,
            len(feed.entries),
        )

        # The state advances once the feed parsed, whatever happens below.
        try:
            new_entries = diff_feed(feed, state)
            if new_entries:
                await self.notifier.send_entries(new_entries)
        except DeliveryError as e:
            logger.error("Failed to send notifications: %s", e)
        except Exception as e:
            logger.error("Unexpected error while sending notifications: %s", e)

        return state.advanced_to(feed.updated)


def setup_logging(verbose: bool = False) -> None:
    """
    Configure application logging.

    Parameters
    ----------
    verbose : bool
        If True, set log level to DEBUG.
    """
    level = logging.DEBUG if verbose else logging.INFO

    coloredlogs.install(
        level=level,
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Kernel release notifications for Discord webhooks",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Optional path to a YAML configuration file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    setup_logging(args.verbose)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error("%s, exiting...", e)
        sys.exit(1)

    daemon = KNewsNotifier(config)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    main_task = loop.create_task(daemon.start())

    def signal_handler():
        logger.info("Received shutdown signal")
        main_task.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    try:
        loop.run_until_complete(main_task)
    except asyncio.CancelledError:
        logger.info("Poll loop cancelled")
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        loop.run_until_complete(daemon.stop())
        loop.close()


if __name__ == "__main__":
    main()
