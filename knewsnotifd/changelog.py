"""
Changelog link extraction from kernel.org entry summaries.

Best effort only: the lookup depends on the exact markup kernel.org puts
in its feed, where a ``ChangeLog:`` label is followed by an anchor whose
first double-quoted attribute is the changelog URL. Any other layout
resolves to "no changelog".
"""

CHANGELOG_MARKER = "ChangeLog:"
NO_CHANGELOG = "No change log"


def extract_changelog(summary: str) -> str | None:
    """
    Find the changelog URL in an entry summary.

    Parameters
    ----------
    summary : str
        Entry summary text.

    Returns
    -------
    str | None
        The first double-quoted value after the marker, or None when
        the marker or a complete quoted value is missing.
    """
    _, marker, rest = summary.partition(CHANGELOG_MARKER)
    if not marker:
        return None

    parts = rest.split('"', 2)
    if len(parts) < 3:
        return None

    url = parts[1].strip()
    return url or None


def format_changelog(summary: str) -> str:
    """Render the changelog line shown in a release notification."""
    url = extract_changelog(summary)
    if url is None:
        return NO_CHANGELOG
    return f"[View changelog]({url})"
