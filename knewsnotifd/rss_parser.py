"""
RSS/Atom feed parsing module.

Decodes the local feed snapshot with feedparser.
"""

import logging
from typing import Any

import feedparser

from knewsnotifd.errors import MissingFieldError, ParseError
from knewsnotifd.models import Entry, ParsedFeed, struct_to_datetime
from knewsnotifd.snapshot import FeedSnapshot

logger = logging.getLogger(__name__)

# Bozo conditions that still yield a usable feed
RECOVERABLE_ERRORS = (
    feedparser.CharacterEncodingOverride,
    feedparser.CharacterEncodingUnknown,
    feedparser.NonXMLContentType,
    feedparser.UndeclaredNamespace,
)


class FeedParser:
    """
    Feed parser adapter.

    Turns the snapshot written by the fetcher into a ParsedFeed.
    """

    def __init__(self, snapshot: FeedSnapshot):
        """
        Initialize the feed parser.

        Parameters
        ----------
        snapshot : FeedSnapshot
            Snapshot to read the feed document from.
        """
        self.snapshot = snapshot

    def parse_snapshot(self) -> ParsedFeed:
        """
        Read and parse the current snapshot.

        Returns
        -------
        ParsedFeed
            Structured feed.

        Raises
        ------
        ParseError
            If the snapshot is unreadable or not a feed document.
        """
        return self.parse(self.snapshot.read())

    def parse(self, content: bytes | str) -> ParsedFeed:
        """
        Parse feed content.

        Parameters
        ----------
        content : bytes | str
            Raw feed XML.

        Returns
        -------
        ParsedFeed
            Structured feed.

        Raises
        ------
        ParseError
            If feedparser does not recognize the document as a feed.
        """
        # Some servers return leading newlines which break XML declaration parsing
        content = content.lstrip()
        parsed: Any = feedparser.parse(content)

        if parsed.bozo:
            error = parsed.get("bozo_exception")
            if not isinstance(error, RECOVERABLE_ERRORS):
                raise ParseError(f"Malformed feed document: {error}")
            logger.warning("Feed has parsing issues: %s", error)

        if not parsed.get("version"):
            raise ParseError("Unsupported feed format")

        feed_info = parsed.feed
        updated = struct_to_datetime(
            feed_info.get("updated_parsed") or feed_info.get("published_parsed")
        )

        entries = []
        for index, raw_entry in enumerate(parsed.entries):
            try:
                entries.append(Entry.from_feedparser(raw_entry))
            except MissingFieldError as e:
                logger.warning("Skipping entry #%d: %s", index, e)

        return ParsedFeed(
            updated=updated,
            entries=tuple(entries),
            title=feed_info.get("title", ""),
        )
