#!/usr/bin/env python3
"""
Quake Log Tools - Log Parser

Parses a Quake III Arena games.log file and outputs per-match statistics
(total kills, players, kills per player and kills by means of death) as a
JSON object keyed "game_1", "game_2", ... in log order.
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional, TextIO

from ..base import JSONTool, QuakeTool
from .errors import QuakeLogError
from .match_parser import WORLD, Match, parse_log
from .match_report import build_report, render_report

__all__ = ['QuakeLogParserTool', 'main']

logger = logging.getLogger(__name__)

# Process exit codes
EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_OPEN_ERROR = 2
EXIT_OUTPUT_ERROR = 4


class QuakeLogParserTool(JSONTool):
    """Command line shell around the match parser."""

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the log parser tool.

        Args:
            config: Configuration dictionary from Config class
        """
        super().__init__(config)
        self.world_name = self.get_config('parser.world_name', WORLD)
        self.indent = self.get_config('parser.indent', 2)
        self.output_dir = self.get_config('general.output_path', 'output')

    def parse_file(self, log_file: str) -> List[Match]:
        """
        Parse a log file into its matches.

        Args:
            log_file: Path to the games.log file

        Returns:
            The finished matches in log order

        Raises:
            OSError: If the file cannot be opened
            QuakeLogError: If the log cannot be parsed
        """
        resolved_path = self.resolve_path(log_file)
        logger.info(f"Parsing log file: {resolved_path}")

        with open(resolved_path, 'r', encoding='utf-8', errors='replace') as log:
            return parse_log(log, world_name=self.world_name)

    def run(self, log_file: str, output_file: Optional[str] = None, stream: Optional[TextIO] = None) -> int:
        """
        Parse a log file and write the JSON report.

        Args:
            log_file: Path to the games.log file
            output_file: Optional JSON file to write instead of the output stream
            stream: Output stream, defaults to stdout

        Returns:
            Process exit code
        """
        try:
            matches = self.parse_file(log_file)
        except QuakeLogError as e:
            logger.error(f"Failed to parse file: {e}")
            return EXIT_PARSE_ERROR
        except OSError as e:
            logger.error(f"Failed to open file: {e}")
            return EXIT_OPEN_ERROR

        try:
            if output_file:
                path = self.write_json(build_report(matches), output_file, indent=self.indent)
                logger.info(f"Report for {len(matches)} matches saved to: {path}")
            else:
                stream = stream or sys.stdout
                stream.write(render_report(matches, indent=self.indent))
                stream.write('\n')
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write match report: {e}")
            return EXIT_OUTPUT_ERROR

        return EXIT_OK


def main():
    """
    Main entry point for the log parser command line tool.
    """
    parser = argparse.ArgumentParser(
        description="Parse a Quake III Arena games.log and output match statistics as JSON.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s games.log
    %(prog)s games.log --output report.json
    %(prog)s games.log --profile my_server

Configuration:
    - parser.world_name: Actor name of environment kills (default: <world>)
    - parser.indent: JSON indentation (default: 2)
    - general.output_path: Directory for --output files
        """
    )
    parser.add_argument("file", help="Path to the games.log file to parse")
    parser.add_argument(
        "--output",
        help="Write the JSON report to this file instead of standard output"
    )

    QuakeTool.add_standard_arguments(parser)
    args = parser.parse_args()

    config = QuakeLogParserTool.load_config(args.profile)

    tool = QuakeLogParserTool(config)
    exit_code = tool.run(args.file, args.output)

    if args.console:
        logger.info(f"Log parser finished with exit code {exit_code}")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
