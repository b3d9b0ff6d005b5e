"""Log phrase search.

``read_file`` answers "is there NO match?": it returns False when the phrase
is found and True when it is not. Fact code depends on that polarity.
"""

from __future__ import annotations

import glob
import logging
import os
from collections import deque
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional, Union

LOG = logging.getLogger(__name__)

ACCEPTED_FORMATS = (".log", ".txt")

Timestamp = Union[int, float, datetime]


class SearchStrategy(str, Enum):
    """How read_file searches, picked from the arguments given."""

    TAIL = "tail"  # Last N lines of one file
    WHOLE_FILE = "whole_file"
    TIME_WINDOW = "time_window"  # Newest glob match modified in the window


def _epoch(value: Timestamp) -> float:
    if isinstance(value, datetime):
        return value.timestamp()
    return float(value)


def _read_lines(path: str) -> Optional[Iterable[str]]:
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.readlines()
    except OSError as e:
        LOG.debug("[logs] Unable to read %s: %s", path, e)
        return None


def _tail_lines(path: str, number_of_lines: int) -> Optional[Iterable[str]]:
    count = max(int(number_of_lines), 0)
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return deque(f, maxlen=count)
    except OSError as e:
        LOG.debug("[logs] Unable to read %s: %s", path, e)
        return None


def _contains(lines: Optional[Iterable[str]], phrase: str) -> bool:
    if lines is None:
        return False
    return any(phrase in line for line in lines)


def newest_file_modified_between(pattern: str, time_from: Timestamp, time_to: Timestamp) -> Optional[str]:
    """Newest file matching a glob whose mtime falls in [time_from, time_to]."""
    start, end = _epoch(time_from), _epoch(time_to)
    newest = None
    newest_mtime = None
    for candidate in glob.glob(pattern):
        if not os.path.isfile(candidate):
            continue
        mtime = os.path.getmtime(candidate)
        if start <= mtime <= end and (newest_mtime is None or mtime > newest_mtime):
            newest, newest_mtime = candidate, mtime
    return newest


def search_strategy(
    path: str,
    phrase: str,
    number_of_lines: Optional[int] = None,
    time_from: Optional[Timestamp] = None,
    time_to: Optional[Timestamp] = None,
) -> Optional[SearchStrategy]:
    """Which search read_file will run for these arguments, or None for no search."""
    if not phrase and (path is None or not str(path).strip()):
        return None

    known_format = os.path.splitext(path)[1] in ACCEPTED_FORMATS
    has_lines = number_of_lines is not None
    has_window = time_from is not None and time_to is not None

    if known_format and has_lines:
        return SearchStrategy.TAIL
    elif known_format:
        return SearchStrategy.WHOLE_FILE
    elif not has_lines and has_window:
        return SearchStrategy.TIME_WINDOW
    elif has_lines:
        return SearchStrategy.TAIL
    return None


def read_file(
    path: str,
    phrase: str,
    number_of_lines: Optional[int] = None,
    time_from: Optional[Timestamp] = None,
    time_to: Optional[Timestamp] = None,
) -> bool:
    """Check a log file for a phrase.

    Args:
        path: Path to a .log/.txt file, or a glob over a log directory
        phrase: Text to search for
        number_of_lines: Only search this many lines from the end of the file
        time_from: Start of the modification time window (epoch seconds or datetime)
        time_to: End of the modification time window

    Returns:
        False if the phrase was found, True if it was not. Also False when
        both phrase and path are empty, or when no search strategy applies.
    """
    strategy = search_strategy(path, phrase, number_of_lines, time_from, time_to)

    if strategy is SearchStrategy.TAIL:
        return not _contains(_tail_lines(path, number_of_lines), phrase)
    elif strategy is SearchStrategy.WHOLE_FILE:
        return not _contains(_read_lines(path), phrase)
    elif strategy is SearchStrategy.TIME_WINDOW:
        log_file = newest_file_modified_between(path, time_from, time_to)
        if log_file is None:
            LOG.debug("[logs] No file matching %s modified in window", path)
            return True
        return not _contains(_read_lines(log_file), phrase)
    return False
