"""One-line text artifacts and the idempotency guard.

Two small files live in the workspace between pipeline runs:

- the version file, holding the last computed version string
- the state file, holding the id of the last processed commit

Both are written via a temporary file in the same directory followed by
an atomic rename, so a reader never sees a half-written line. There is
no locking: at most one invocation per workspace may run at a time.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from releaseforge.core.exceptions import StateFileError
from releaseforge.core.logging import get_logger

logger = get_logger(__name__)


class TextArtifact:
    """A file that holds exactly one line of text."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def read_line(self) -> Optional[str]:
        """Return the first line, stripped, or None if missing or blank.

        An unreadable file is treated like a missing one.
        """
        if not self.exists():
            return None
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read file", path=self.path, error=e)
            return None

        lines = text.strip().splitlines()
        if not lines:
            return None
        return lines[0].strip() or None

    def write_line(self, value: str) -> None:
        """Atomically replace the file contents with a single line.

        Raises:
            StateFileError: If the file cannot be written.
        """
        assert "\n" not in value, "artifact value must be a single line"

        dir_path = self.path.parent
        try:
            dir_path.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(dir_path)
            )
        except OSError as e:
            raise StateFileError(f"Cannot write {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value + "\n")
            Path(temp_path).replace(self.path)
        except OSError as e:
            try:
                os.unlink(temp_path)
            except OSError as cleanup_err:
                logger.debug(
                    f"Failed to clean up temp file {temp_path}: {cleanup_err}"
                )
            raise StateFileError(f"Cannot write {self.path}: {e}") from e

        logger.debug("Wrote file", path=self.path, value=value)


class IdempotencyGuard:
    """Detect a repeated invocation on an already processed commit.

    States:
        Fresh: no record, or the record names a different commit.
        Repeated: the record names the current commit.

    A forced bump or forced release bypasses the guard, as does
    disabling it.
    """

    def __init__(self, state: TextArtifact, enabled: bool = True) -> None:
        self.state = state
        self.enabled = enabled

    @property
    def last_processed_commit(self) -> Optional[str]:
        return self.state.read_line()

    def is_repeated(self, head_commit: str) -> bool:
        """True when the persisted record equals head_commit."""
        assert head_commit, "head_commit must not be empty"
        return self.last_processed_commit == head_commit

    def should_skip(self, head_commit: str, forced: bool = False) -> bool:
        """Decide whether this invocation short-circuits.

        Args:
            head_commit: Id of the current commit.
            forced: Whether a bump or release was forced.

        Returns:
            True only when the guard is enabled, nothing is forced and the
            commit was already processed.
        """
        if not self.enabled or forced:
            return False
        repeated = self.is_repeated(head_commit)
        if repeated:
            logger.info("Commit already processed, skipping", commit=head_commit)
        return repeated

    def record(self, head_commit: str) -> None:
        """Persist head_commit as the last processed commit."""
        self.state.write_line(head_commit)
