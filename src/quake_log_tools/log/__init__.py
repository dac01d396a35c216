"""
Quake Log Parsing

This package interprets Quake III Arena games.log files: it classifies log
lines, segments them into matches, accumulates kill statistics per match and
renders them as an ordered JSON report. The downloader fetches logs from a
server host.
"""

__all__ = ['errors', 'line_classifier', 'match_parser', 'match_report', 'log_parser', 'log_downloader']

from .errors import QuakeLogError, MalformedLineError, UnterminatedMatchError, StreamReadError
from .line_classifier import EventKind, LogEvent, LineClassifier
from .match_parser import WORLD, Match, MatchSession, MatchParser, ParserState, parse_log
from .match_report import build_report, render_report, render_report_bytes, report_items
