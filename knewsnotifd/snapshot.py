"""
Local snapshot of the last fetched feed document.
"""

import logging
import os
from pathlib import Path

from knewsnotifd.errors import ParseError, SnapshotWriteError

logger = logging.getLogger(__name__)


class FeedSnapshot:
    """
    The feed document most recently downloaded, kept at a fixed path.

    Writes go to a temporary sibling file that then replaces the
    snapshot, so an interrupted write leaves the previous copy intact.
    """

    def __init__(self, path: str | Path):
        """
        Initialize the snapshot.

        Parameters
        ----------
        path : str | Path
            Location of the snapshot file.
        """
        self.path = Path(path)

    @property
    def _tmp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")

    def write(self, content: bytes) -> Path:
        """
        Overwrite the snapshot with new content.

        Parameters
        ----------
        content : bytes
            Raw feed document.

        Returns
        -------
        Path
            Path of the written snapshot.

        Raises
        ------
        SnapshotWriteError
            If the file could not be written.
        """
        tmp_path = self._tmp_path
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(content)
            os.replace(tmp_path, self.path)
        except OSError as e:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                logger.debug("Could not remove temporary snapshot %s", tmp_path)
            raise SnapshotWriteError(f"Failed to write snapshot {self.path}: {e}") from e

        logger.debug("Wrote %d bytes to %s", len(content), self.path)
        return self.path

    def read(self) -> bytes:
        """
        Read the snapshot in full.

        Returns
        -------
        bytes
            Raw feed document.

        Raises
        ------
        ParseError
            If the file could not be read.
        """
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise ParseError(f"Failed to read snapshot {self.path}: {e}") from e
