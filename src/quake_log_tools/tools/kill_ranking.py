#!/usr/bin/env python3
"""
Quake Log Tools - Kill Ranking

Ranks players across all matches of a games.log by their net kills.
Results are logged as a ranked table and saved as CSV, and optionally as an
Excel workbook.
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ..base import FileBasedTool, QuakeTool
from ..log.errors import QuakeLogError
from ..log.match_parser import WORLD, Match, parse_log

try:
    import pandas as pd
    import openpyxl
except ImportError:
    raise ImportError("This tool requires pandas and openpyxl. Install with: pip install pandas openpyxl")

__all__ = ['PlayerRanking', 'KillRanking', 'main']

logger = logging.getLogger(__name__)


@dataclass
class PlayerRanking:
    """Aggregated statistics of one player over all matches."""
    player: str
    net_kills: int = 0
    matches: int = 0

    @property
    def average(self) -> float:
        """Net kills per match played."""
        if not self.matches:
            return 0.0
        return round(self.net_kills / self.matches, 2)


class KillRanking(FileBasedTool):
    """
    Ranks players of a games.log by net kills.

    Net kills are the per-match kill differentials summed over every match the
    player took part in, so environment deaths count against a player.
    """

    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

    CSV_HEADERS = ["Rank", "Player", "Net Kills", "Matches", "Average"]

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the KillRanking with configuration.

        Args:
            config: Configuration dictionary from Config class
        """
        super().__init__(config)
        self.initialize_directories()
        self.world_name = self.get_config('parser.world_name', WORLD)

    def parse_matches(self, log_file: str) -> List[Match]:
        """
        Parse the matches of a log file.

        Args:
            log_file: Path to the games.log file

        Returns:
            The finished matches in log order
        """
        resolved_path = self.resolve_path(log_file)
        logger.info(f"Parsing log file: {resolved_path}")

        with open(resolved_path, 'r', encoding='utf-8', errors='replace') as log:
            return parse_log(log, world_name=self.world_name)

    def rank_players(self, matches: Sequence[Match]) -> List[PlayerRanking]:
        """
        Aggregate and rank players.

        Args:
            matches: Finished matches

        Returns:
            Rankings sorted by net kills (descending), then player name
        """
        rankings: Dict[str, PlayerRanking] = {}

        for match in matches:
            for player in match.players:
                ranking = rankings.setdefault(player, PlayerRanking(player))
                ranking.net_kills += match.kills[player]
                ranking.matches += 1

        return sorted(rankings.values(), key=lambda r: (-r.net_kills, r.player))

    def print_results(self, rankings: List[PlayerRanking]) -> int:
        """
        Log the ranking table.

        Args:
            rankings: Ranked players

        Returns:
            Number of ranked players
        """
        if not rankings:
            logger.info("No players found.")
            return 0

        logger.info("Net kills per player (ranked):")
        logger.info("=" * 50)

        for rank, ranking in enumerate(rankings, start=1):
            logger.info(f"{rank:3d}. {ranking.player}: {ranking.net_kills} net kills "
                        f"in {ranking.matches} matches (avg {ranking.average})")

        logger.info("=" * 50)
        return len(rankings)

    def _prepare_rows(self, rankings: List[PlayerRanking]) -> List[Dict[str, Any]]:
        return [
            {
                "Rank": rank,
                "Player": ranking.player,
                "Net Kills": ranking.net_kills,
                "Matches": ranking.matches,
                "Average": ranking.average,
            }
            for rank, ranking in enumerate(rankings, start=1)
        ]

    def save_to_csv(self, rankings: List[PlayerRanking]) -> str:
        """
        Save the ranking to a timestamped CSV file in the output directory.

        Args:
            rankings: Ranked players

        Returns:
            Path to the saved CSV file
        """
        output_file = self.generate_timestamped_filename("kill_ranking", "csv")
        file_path = self.write_csv(self._prepare_rows(rankings), output_file, headers=self.CSV_HEADERS)

        logger.info(f"Kill ranking saved to: {file_path} "
                    f"(timestamp: {datetime.now().strftime(self.TIMESTAMP_FORMAT)})")
        return file_path

    def save_to_excel(self, rankings: List[PlayerRanking], output_file: Optional[str] = None) -> str:
        """
        Save the ranking to an Excel workbook.

        Args:
            rankings: Ranked players
            output_file: Optional path; defaults to a timestamped file in the output directory

        Returns:
            Path to the saved workbook
        """
        if not output_file:
            output_file = self.generate_timestamped_filename("kill_ranking", "xlsx")
        excel_path = self.output_path_for(output_file)

        df = pd.DataFrame(self._prepare_rows(rankings), columns=self.CSV_HEADERS)

        with pd.ExcelWriter(excel_path, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Ranking')
            worksheet = writer.sheets['Ranking']

            for idx, column in enumerate(df.columns, 1):
                letter = openpyxl.utils.get_column_letter(idx)
                widest = max([len(str(value)) for value in df[column]] + [len(column)])
                worksheet.column_dimensions[letter].width = widest + 2

        logger.info(f"Kill ranking exported to {excel_path}")
        return excel_path

    def run(self, log_file: str, excel: bool = False) -> Dict[str, Any]:
        """
        Run the kill ranking.

        Args:
            log_file: Path to the games.log file
            excel: Also export the ranking as an Excel workbook

        Returns:
            Dictionary with analysis results
        """
        logger.info("Starting kill ranking...")

        matches = self.parse_matches(log_file)
        rankings = self.rank_players(matches)

        result = {
            "success": True,
            "match_count": len(matches),
            "player_count": len(rankings),
            "output_file": None,
            "excel_file": None,
        }

        if rankings:
            self.print_results(rankings)
            result["output_file"] = self.save_to_csv(rankings)
            if excel:
                result["excel_file"] = self.save_to_excel(rankings)
        else:
            logger.warning("No players found in the log file.")
            result["success"] = False

        return result


def main():
    """
    Main entry point for the kill ranking command line tool.
    """
    parser = argparse.ArgumentParser(
        description="Rank Quake III Arena players by net kills across all matches of a games.log.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s games.log
    %(prog)s games.log --excel
    %(prog)s games.log --profile my_server

Configuration:
    - general.output_path: Directory for CSV and Excel output files
        """
    )
    parser.add_argument("file", help="Path to the games.log file")
    parser.add_argument("--excel", action="store_true", help="Also export the ranking as an Excel workbook")

    QuakeTool.add_standard_arguments(parser)
    args = parser.parse_args()

    try:
        config = KillRanking.load_config(args.profile)

        ranking = KillRanking(config)
        result = ranking.run(args.file, excel=args.excel)

        if args.console:
            logger.info(f"Kill ranking completed: {result}")

        return 0 if result["success"] else 1

    except (QuakeLogError, OSError) as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
