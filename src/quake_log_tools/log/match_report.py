"""
Match report rendering.

Matches are reported as one JSON object keyed "game_1", "game_2", ... in the
order they were found in the log. The report is built from an explicit list
of (key, value) pairs so the key order never depends on how a mapping happens
to iterate.
"""

import json
from collections import OrderedDict
from typing import Any, Dict, List, Sequence, Tuple

from .match_parser import Match

__all__ = ['GAME_KEY_FORMAT', 'report_items', 'build_report', 'render_report', 'render_report_bytes']

GAME_KEY_FORMAT = "game_{}"


def report_items(matches: Sequence[Match]) -> List[Tuple[str, Dict[str, Any]]]:
    """Positional (key, match) pairs, numbered from 1."""
    return [(GAME_KEY_FORMAT.format(index), match.to_dict()) for index, match in enumerate(matches, 1)]


def build_report(matches: Sequence[Match]) -> "OrderedDict[str, Dict[str, Any]]":
    """Report object ready for any JSON writer."""
    return OrderedDict(report_items(matches))


def render_report(matches: Sequence[Match], indent: int = 2) -> str:
    """
    Render matches as JSON text.

    Args:
        matches: Finished matches in log order
        indent: Indentation width; None for compact output

    Returns:
        The JSON document
    """
    return json.dumps(build_report(matches), indent=indent, ensure_ascii=False)


def render_report_bytes(matches: Sequence[Match], indent: int = 2) -> bytes:
    """Render matches as UTF-8 encoded JSON."""
    return render_report(matches, indent).encode('utf-8')
