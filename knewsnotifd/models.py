"""
Data model shared by the poll loop components.
"""

import calendar
import dataclasses
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from knewsnotifd.errors import MissingFieldError


def struct_to_datetime(value: time.struct_time | None) -> datetime | None:
    """
    Convert a feedparser UTC time tuple into an aware datetime.

    Parameters
    ----------
    value : time.struct_time | None
        A ``*_parsed`` value from feedparser.

    Returns
    -------
    datetime | None
        The timestamp in UTC, or None if the value is missing.
    """
    if value is None:
        return None
    return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)


@dataclass(frozen=True)
class Entry:
    """
    A single feed entry.

    Attributes
    ----------
    title : str
        Entry title.
    summary : str
        Free-form entry summary, may embed a changelog reference.
    published : datetime | None
        Publication timestamp in UTC.
    """

    title: str
    summary: str
    published: datetime | None = None

    @classmethod
    def from_feedparser(cls, entry: Any) -> "Entry":
        """
        Create an Entry from a feedparser entry.

        Parameters
        ----------
        entry : Any
            A feedparser entry object.

        Returns
        -------
        Entry
            Normalized entry instance.

        Raises
        ------
        MissingFieldError
            If the entry has no title or no summary.
        """
        title = entry.get("title")
        if title is None:
            raise MissingFieldError("title")

        summary = entry.get("summary")
        if summary is None:
            raise MissingFieldError("summary")

        return cls(
            title=title,
            summary=summary,
            published=struct_to_datetime(entry.get("published_parsed")),
        )


@dataclass(frozen=True)
class ParsedFeed:
    """
    Structured view of one fetched feed document.

    Attributes
    ----------
    updated : datetime | None
        Feed-level update timestamp in UTC.
    entries : tuple[Entry, ...]
        Entries in document order.
    title : str
        Feed title, used for logging only.
    """

    updated: datetime | None = None
    entries: tuple[Entry, ...] = field(default_factory=tuple)
    title: str = ""


@dataclass(frozen=True)
class PollState:
    """
    State carried from one poll cycle to the next.

    Attributes
    ----------
    last_post_time : datetime | None
        ``updated`` value of the last successfully parsed feed. None
        until a baseline has been recorded.
    """

    last_post_time: datetime | None = None

    @property
    def has_baseline(self) -> bool:
        """Whether a previous feed update has been recorded."""
        return self.last_post_time is not None

    def advanced_to(self, updated: datetime | None) -> "PollState":
        """Return the state after a successfully parsed feed."""
        return dataclasses.replace(self, last_post_time=updated)
