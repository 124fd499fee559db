"""Line history persisted between shell sessions."""
from __future__ import annotations
from typing import List, Sequence
import logging
import os

from cqlpy.utils.constants import DEFAULT_HISTORY_FILE, DEFAULT_HISTORY_SIZE

logger = logging.getLogger(__name__)


class HistoryFile:
    """One raw input line per record.

    Loading and saving are best-effort: a missing or unwritable file never
    stops the shell.
    """

    def __init__(self, path: str = DEFAULT_HISTORY_FILE, max_entries: int = DEFAULT_HISTORY_SIZE):
        self.path = os.path.expanduser(path)
        self.max_entries = max_entries

    def load(self) -> List[str]:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                lines = [line.rstrip('\n') for line in f]
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("History not loaded from %s: %s", self.path, e)
            return []
        return [line for line in lines if line][-self.max_entries:]

    def save(self, entries: Sequence[str]) -> None:
        kept = [e for e in entries if e and '\n' not in e][-self.max_entries:]
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                for entry in kept:
                    f.write(entry + '\n')
        except OSError as e:
            logger.debug("History not saved to %s: %s", self.path, e)
