"""
Quake Log Match Parser

Segments a games.log stream into matches and accumulates kill statistics for
each of them.

The parser is a two-state machine:

- LOOKING_FOR_MATCH: waiting for an InitGame event; everything else is inert.
- MATCH_OPEN: kills are registered on the open MatchSession. ShutdownGame (or
  a divider line) finalizes the session into a Match. A second InitGame
  finalizes the open match before starting the next one.

Input that ends while a match is open is an error; the parser never drops a
partially observed match silently.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Set, TextIO, Tuple

from .errors import StreamReadError, UnterminatedMatchError
from .line_classifier import EventKind, LineClassifier, LogEvent

__all__ = ['WORLD', 'Match', 'MatchSession', 'ParserState', 'MatchParser', 'parse_log']

logger = logging.getLogger(__name__)

# Actor name the game uses for environment kills (falling, lava, triggers)
WORLD = '<world>'


@dataclass(frozen=True)
class Match:
    """Statistics of one finished match."""
    total_kills: int
    players: List[str]
    kills: Dict[str, int]
    kills_by_means: Dict[str, int]

    def to_dict(self) -> Dict[str, object]:
        """Field-level serialization, with map keys sorted for stable output."""
        return {
            'total_kills': self.total_kills,
            'players': list(self.players),
            'kills': {player: self.kills[player] for player in sorted(self.kills)},
            'kills_by_means': {means: self.kills_by_means[means] for means in sorted(self.kills_by_means)},
        }


@dataclass
class MatchSession:
    """Working totals of the match currently open."""
    world_name: str = WORLD
    total_kills: int = 0
    players: Set[str] = field(default_factory=set)
    kills: Dict[str, int] = field(default_factory=dict)
    kills_by_means: Dict[str, int] = field(default_factory=dict)

    def register_kill(self, killer: str, victim: str, cause: str) -> None:
        """
        Register a kill event.

        World kills count towards the total and the means but only take a
        kill away from the victim. Self-kills leave every differential as is.

        Args:
            killer: Name of the killer, or the world sentinel
            victim: Name of the killed player
            cause: Means of death, e.g. MOD_ROCKET
        """
        self.total_kills += 1

        for player in (killer, victim):
            if player == self.world_name:
                continue
            # Players with zero net kills must still show up in the kills map
            self.kills.setdefault(player, 0)
            self.players.add(player)

        if killer == self.world_name:
            if victim != self.world_name:
                self.kills[victim] -= 1
        elif killer != victim:
            self.kills[killer] += 1

        self.kills_by_means[cause] = self.kills_by_means.get(cause, 0) + 1

    def finalize(self) -> Match:
        """Freeze the working totals into a Match."""
        return Match(
            total_kills=self.total_kills,
            players=sorted(self.players),
            kills=dict(self.kills),
            kills_by_means=dict(self.kills_by_means),
        )


class ParserState(Enum):
    """States of the match parser."""
    LOOKING_FOR_MATCH = 'looking_for_match'
    MATCH_OPEN = 'match_open'


class MatchParser:
    """
    State machine turning classified log events into finished matches.

    A parser owns exactly one open MatchSession at a time. Use a fresh parser
    (or reset()) for each log.
    """

    def __init__(self, classifier: Optional[LineClassifier] = None, world_name: str = WORLD):
        """
        Initialize the parser.

        Args:
            classifier: Line classifier to use. A default one is created if not provided.
            world_name: Actor name that marks environment kills
        """
        self.classifier = classifier or LineClassifier()
        self.world_name = world_name
        self.reset()

    def reset(self) -> None:
        """Drop all state and go back to looking for a match."""
        self.state = ParserState.LOOKING_FOR_MATCH
        self.session: Optional[MatchSession] = None
        self.matches: List[Match] = []

    def handle(self, event: LogEvent) -> None:
        """
        Apply one event to the state machine.

        Args:
            event: The classified event
        """
        if self.state is ParserState.LOOKING_FOR_MATCH:
            if event.kind is EventKind.MATCH_START:
                self._open_match()
            return

        if event.kind is EventKind.KILL:
            self.session.register_kill(event.killer, event.victim, event.cause)
        elif event.kind is EventKind.MATCH_END:
            self._close_match()
        elif event.kind is EventKind.MATCH_START:
            logger.warning(f"Match {len(self.matches) + 1} started before the previous one ended; closing it")
            self._close_match()
            self._open_match()

    def parse_event(self, payload: str) -> None:
        """
        Classify and apply an event payload (a log line without its timestamp header).

        Args:
            payload: Event text, e.g. "InitGame:" or "Kill: 0 1 2: A killed B by MOD_ROCKET"
        """
        self.handle(self.classifier.classify_payload(payload))

    def parse_lines(self, lines: Iterable[str]) -> List[Match]:
        """
        Parse complete log lines, timestamp headers included.

        Each call starts from a clean parser, so state left by an earlier
        parse that raised never leaks into this one.

        Args:
            lines: Log lines in file order, e.g. an open text file

        Returns:
            The finished matches in the order they appear in the log

        Raises:
            MalformedLineError: If a line has no timestamp header
            UnterminatedMatchError: If the input ends while a match is open
            StreamReadError: If reading from the input fails
        """
        self.reset()
        line_count = 0
        for line_number, line in _read_lines(lines):
            line_count = line_number
            self.handle(self.classifier.classify(line, line_number))

        if self.state is ParserState.MATCH_OPEN:
            raise UnterminatedMatchError()

        logger.info(f"Parsed {len(self.matches)} matches from {line_count} lines")
        return list(self.matches)

    def _open_match(self) -> None:
        logger.debug(f"Match {len(self.matches) + 1} opened")
        self.session = MatchSession(world_name=self.world_name)
        self.state = ParserState.MATCH_OPEN

    def _close_match(self) -> None:
        match = self.session.finalize()
        self.matches.append(match)
        logger.debug(f"Match {len(self.matches)} closed with {match.total_kills} kills")
        self.session = None
        self.state = ParserState.LOOKING_FOR_MATCH


def _read_lines(lines: Iterable[str]) -> Iterator[Tuple[int, str]]:
    """Number lines from 1, turning read failures into StreamReadError."""
    iterator = iter(lines)
    line_number = 0
    while True:
        try:
            line = next(iterator)
        except StopIteration:
            return
        except (OSError, UnicodeDecodeError) as e:
            # Text streams decode whole chunks, so only the last good line is known
            raise StreamReadError(line_number, e) from e
        line_number += 1
        yield line_number, line


def parse_log(log: TextIO, world_name: str = WORLD) -> List[Match]:
    """
    Parse a games.log stream into its matches.

    The caller owns the stream and is responsible for closing it.

    Args:
        log: Text stream (or any iterable of lines) to read
        world_name: Actor name that marks environment kills

    Returns:
        The finished matches in log order

    Raises:
        QuakeLogError: If the log is malformed, truncated or unreadable
    """
    return MatchParser(world_name=world_name).parse_lines(log)
