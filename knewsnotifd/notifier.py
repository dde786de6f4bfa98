"""
Release notifications.

Defines the interface a webhook backend must implement and the notifier
that formats kernel releases into webhook messages.
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from knewsnotifd.changelog import format_changelog
from knewsnotifd.config import WebhookConfig
from knewsnotifd.errors import ReachabilityError
from knewsnotifd.models import Entry
from knewsnotifd.webhook import Embed, EmbedAuthor, EmbedFooter, WebhookInfo, WebhookMessage

logger = logging.getLogger(__name__)


@runtime_checkable
class WebhookClient(Protocol):
    """
    Protocol defining the interface for webhook backends.

    The @runtime_checkable decorator allows using isinstance() checks
    against this protocol for structural typing validation.
    """

    async def get_information(self) -> WebhookInfo:
        """
        Check that the webhook exists and return its identity.

        Raises
        ------
        ReachabilityError
            If the webhook cannot be contacted.
        """
        ...

    async def send(self, message: WebhookMessage) -> None:
        """
        Deliver one message.

        Raises
        ------
        DeliveryError
            If the message could not be delivered.
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the client."""
        ...


class Notifier:
    """
    Formats and sends release notifications.

    Messages are sent one at a time with a fixed pause between them.
    """

    def __init__(self, client: WebhookClient, config: WebhookConfig):
        """
        Initialize the notifier.

        Parameters
        ----------
        client : WebhookClient
            Backend used to deliver messages.
        config : WebhookConfig
            Branding and pacing settings.
        """
        self.client = client
        self.config = config

    def _footer(self) -> EmbedFooter:
        return EmbedFooter(self.config.footer_text, self.config.footer_icon_url)

    def _message(self) -> WebhookMessage:
        return WebhookMessage(
            username=self.config.username,
            avatar_url=self.config.avatar_url,
        )

    def build_online_message(self, version: str) -> WebhookMessage:
        """Build the message announcing the daemon is running."""
        return self._message().embed(
            Embed(
                title=f"🟢 knewsnotifd {version} online",
                footer=self._footer(),
            )
        )

    def build_entry_message(self, entry: Entry) -> WebhookMessage:
        """
        Build the notification for one release.

        Parameters
        ----------
        entry : Entry
            The new feed entry.

        Returns
        -------
        WebhookMessage
            Message with a single embed for the entry.
        """
        return self._message().embed(
            Embed(
                title=entry.title,
                author=EmbedAuthor(self.config.author_name, self.config.author_url),
                description=format_changelog(entry.summary),
                footer=self._footer(),
            )
        )

    async def check_reachable(self) -> WebhookInfo:
        """
        Verify the webhook can be contacted.

        Returns
        -------
        WebhookInfo
            Identity reported by the webhook.

        Raises
        ------
        ReachabilityError
            If the webhook cannot be contacted.
        """
        try:
            return await self.client.get_information()
        except ReachabilityError:
            raise
        except Exception as e:
            raise ReachabilityError(str(e)) from e

    async def send_online(self, version: str) -> None:
        """Send the startup notification."""
        await self.client.send(self.build_online_message(version))
        logger.info("Sent online notification")

    async def send_entries(self, entries: Sequence[Entry]) -> int:
        """
        Send one notification per entry, in order.

        Parameters
        ----------
        entries : Sequence[Entry]
            New entries in feed order.

        Returns
        -------
        int
            Number of sent messages.

        Raises
        ------
        DeliveryError
            On the first failed send; remaining entries are not sent.
        """
        if entries:
            logger.info("Sending %d notification(s) to webhook", len(entries))

        sent = 0
        for index, entry in enumerate(entries):
            if index:
                await asyncio.sleep(self.config.send_delay)
            await self.client.send(self.build_entry_message(entry))
            sent += 1
            logger.info("Sent notification for: %s", entry.title[:50])

        return sent
