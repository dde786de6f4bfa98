"""
Change detection between two polls of the same feed.

The feed-level ``updated`` timestamp decides whether anything changed;
per-entry ``published`` timestamps decide which entries are new. The two
signals can disagree (``updated`` bumped without any newer entry), in
which case the cycle sends nothing.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from knewsnotifd.models import Entry, ParsedFeed, PollState

logger = logging.getLogger(__name__)


def select_new_entries(entries: Iterable[Entry], baseline: datetime) -> list[Entry]:
    """
    Select entries published strictly after the baseline.

    Parameters
    ----------
    entries : Iterable[Entry]
        Entries in feed order.
    baseline : datetime
        Last recorded feed update.

    Returns
    -------
    list[Entry]
        New entries, in feed order. Entries without a publication
        timestamp are never new.
    """
    return [
        entry
        for entry in entries
        if entry.published is not None and entry.published > baseline
    ]


def diff_feed(feed: ParsedFeed, state: PollState) -> list[Entry]:
    """
    Compute the entries to notify for a freshly parsed feed.

    Parameters
    ----------
    feed : ParsedFeed
        The feed parsed in the current cycle.
    state : PollState
        State at the start of the cycle.

    Returns
    -------
    list[Entry]
        Entries to notify, empty when there is no baseline yet or the
        feed was not updated.
    """
    if not state.has_baseline:
        logger.info("Recording baseline: feed updated at %s", feed.updated)
        return []

    if feed.updated == state.last_post_time:
        logger.debug("Feed not updated since %s", state.last_post_time)
        return []

    logger.info("Post list was updated (%s -> %s)", state.last_post_time, feed.updated)
    new_entries = select_new_entries(feed.entries, state.last_post_time)
    logger.info("Found %d new post(s)", len(new_entries))
    return new_entries
