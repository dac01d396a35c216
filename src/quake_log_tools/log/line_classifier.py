"""
Quake Log Line Classifier

Splits a raw games.log line into its timestamp header and event payload, and
recognizes the events the match parser cares about: match start, match end
and kills. Everything else with a valid header is irrelevant.

Example lines:
      0:00 InitGame: \\sv_floodProtect\\1\\sv_maxPing\\0 ...
     20:37 Kill: 1022 2 22: <world> killed Isgalamido by MOD_TRIGGER_HURT
     20:54 ShutdownGame:
    26  0:00 ------------------------------------------------------------
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import MalformedLineError

__all__ = ['EventKind', 'LogEvent', 'LineClassifier']

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Kinds of events a log line can carry."""
    MATCH_START = 'match_start'
    MATCH_END = 'match_end'
    KILL = 'kill'
    IRRELEVANT = 'irrelevant'


@dataclass(frozen=True)
class LogEvent:
    """A classified log event. Kill details are only set for KILL events."""
    kind: EventKind
    payload: str = ""
    killer: Optional[str] = None
    victim: Optional[str] = None
    cause: Optional[str] = None


class LineClassifier:
    """
    Classifies log lines into LogEvents.

    The patterns are compiled once at class level and never mutated, so one
    classifier can be shared across any number of parses.
    """

    # A padded minutes:seconds token, or the divider quirk where stray numbers
    # precede the time, e.g. "26  0:00 -----". Matches " 0:00 " in " 0:00 InitGame:".
    HEADER_PATTERN = re.compile(r'^\s*\d+:\d+\s|^\s*[\d\s:]+', re.ASCII)

    # Both names are greedy: an ambiguous line splits at the last " killed "
    # and the last " by "
    KILL_PATTERN = re.compile(
        r'Kill:\s\d+\s\d+\s\d+:\s(?P<killer>.+)\skilled\s(?P<victim>.+)\sby\s(?P<cause>.+?)\s*$',
        re.ASCII
    )

    MATCH_START_PREFIX = 'InitGame:'
    MATCH_END_PREFIX = 'ShutdownGame:'
    # Some logs close a match with a divider line instead of ShutdownGame
    DIVIDER_PREFIX = '---'

    def split_line(self, line: str, line_number: int) -> str:
        """
        Strip the timestamp header from a line.

        Args:
            line: Raw log line, without its line terminator
            line_number: 1-indexed position of the line in the log

        Returns:
            The event payload following the header

        Raises:
            MalformedLineError: If the line has no recognizable header
        """
        header = self.HEADER_PATTERN.match(line)
        if not header:
            raise MalformedLineError(line_number)
        return line[header.end():]

    def classify(self, line: str, line_number: int) -> LogEvent:
        """
        Classify a full log line, header included.

        Args:
            line: Raw log line
            line_number: 1-indexed position of the line in the log

        Returns:
            The classified event

        Raises:
            MalformedLineError: If the line has no recognizable header
        """
        line = line.rstrip('\r\n')
        if not line:
            return LogEvent(EventKind.IRRELEVANT)

        payload = self.split_line(line, line_number)
        return self.classify_payload(payload)

    def classify_payload(self, payload: str) -> LogEvent:
        """
        Classify an event payload (a line with its header already removed).

        Args:
            payload: Event text, e.g. "Kill: 0 1 2: A killed B by MOD_ROCKET"

        Returns:
            The classified event
        """
        if payload.startswith(self.MATCH_START_PREFIX):
            return LogEvent(EventKind.MATCH_START, payload)

        if payload.startswith(self.MATCH_END_PREFIX) or payload.startswith(self.DIVIDER_PREFIX):
            return LogEvent(EventKind.MATCH_END, payload)

        kill_match = self.KILL_PATTERN.search(payload)
        if kill_match:
            return LogEvent(
                EventKind.KILL,
                payload,
                killer=kill_match.group('killer'),
                victim=kill_match.group('victim'),
                cause=kill_match.group('cause'),
            )

        return LogEvent(EventKind.IRRELEVANT, payload)
