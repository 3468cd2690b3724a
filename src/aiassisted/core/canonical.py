"""Serialized access to the canonical files (.ai_state and the Markdown logs)."""

import json
import logging
import os
import tempfile
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from filelock import FileLock, Timeout
from pydantic import ValidationError

from ..errors import LockTimeoutError, MalformedHeaderError, MissingFileError
from ..models import AssistConfig, LogEntry, SessionState
from ..templates.content import get_log_header

logger = logging.getLogger(__name__)


def lock_path_for(path: Path) -> Path:
    return path.with_name(path.name + ".lock")


@contextmanager
def locked(path: Path, timeout: float) -> Iterator[None]:
    """Hold the advisory lock for a canonical file."""
    lock = FileLock(str(lock_path_for(path)), timeout=timeout)
    try:
        with lock:
            yield
    except Timeout as e:
        raise LockTimeoutError(f"Timed out waiting for lock on {path}") from e


class CanonicalStore:
    """Reads and writes the canonical files under their locks.

    Log writes only ever append. State writes replace the file atomically.
    """

    def __init__(self, config: AssistConfig) -> None:
        self.config = config

    def append_log(self, entry: LogEntry) -> Path:
        """Append an entry to the log for its kind.

        Returns the path to the log file.
        """
        log_file = self.config.log_path(entry.kind)

        with locked(log_file, self.config.lock_timeout):
            if not log_file.exists() or log_file.stat().st_size == 0:
                log_file.write_text(get_log_header(log_file.name), encoding="utf-8")

            with log_file.open("a", encoding="utf-8") as f:
                f.write(entry.to_markdown())

        logger.debug("Appended %s entry to %s", entry.kind, log_file)
        return log_file

    def read_state(self) -> SessionState:
        """Load .ai_state. An empty file reads as the default state."""
        state_path = self.config.state_path
        if not state_path.exists():
            raise MissingFileError(f"Missing {state_path}; run 'ai-assisted init'")

        try:
            content = state_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise MalformedHeaderError(f"{state_path} is not UTF-8 text: {e}") from e
        if not content.strip():
            return SessionState()
        try:
            return SessionState.model_validate(json.loads(content))
        except (json.JSONDecodeError, ValidationError) as e:
            raise MalformedHeaderError(f"{state_path} is not a valid state record: {e}") from e

    def write_state(self, state: SessionState) -> None:
        """Replace .ai_state without leaving a partially written file."""
        state_path = self.config.state_path
        data = json.dumps(state.model_dump(mode="json"), indent=2) + "\n"

        fd, tmp_name = tempfile.mkstemp(
            dir=str(state_path.parent), prefix=".ai_state.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp_name, state_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def checkpoint(self, focus: Optional[str] = None) -> SessionState:
        """Stamp last_checkpoint, optionally updating current_focus."""
        with locked(self.config.state_path, self.config.lock_timeout):
            state = self.read_state()
            now = datetime.now().replace(microsecond=0)
            if state.session_start is None:
                state.session_start = now
            if focus is not None:
                state.current_focus = focus
            state.last_checkpoint = now
            self.write_state(state)
        return state

    def add_item(self, field_name: str, item: str) -> SessionState:
        """Append an item to one of the list fields of the state."""
        if field_name not in SessionState.list_fields():
            raise ValueError(
                f"Unknown list field '{field_name}'. "
                f"Expected one of: {', '.join(SessionState.list_fields())}"
            )

        with locked(self.config.state_path, self.config.lock_timeout):
            state = self.read_state()
            getattr(state, field_name).append(item)
            self.write_state(state)
        return state
