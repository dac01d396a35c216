#!/usr/bin/env python3
"""
Means of Death Plotter

Draws a horizontal bar chart of kills per means of death (MOD_ROCKET,
MOD_TRIGGER_HURT, ...) for one match of a games.log or for all matches
combined.
"""

import argparse
import logging
import os
import sys
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from ..base import FileBasedTool, QuakeTool
from ..log.errors import QuakeLogError
from ..log.match_parser import WORLD, Match, parse_log

__all__ = ['MeansPlotter', 'main']

logger = logging.getLogger(__name__)


class MeansPlotter(FileBasedTool):
    """Tool for charting kills by means of death."""

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the plotter.

        Args:
            config: Optional configuration dictionary.
        """
        super().__init__(config)
        self.initialize_directories()

        self.world_name = self.get_config('parser.world_name', WORLD)
        self.default_output_dpi = self.get_config('plot.dpi', 150)
        self.top_n = self.get_config('plot.top_n', 15)
        self.bar_color = self.get_config('plot.bar_color', 'firebrick')

    def count_means(self, matches: Sequence[Match], game: Optional[int] = None) -> Counter:
        """
        Count kills by means.

        Args:
            matches: Finished matches in log order
            game: 1-indexed match number; all matches when None

        Returns:
            Counter of kills per means

        Raises:
            ValueError: If the game number is out of range
        """
        if game is not None:
            if not 1 <= game <= len(matches):
                raise ValueError(f"Game {game} not found, the log has {len(matches)} matches")
            matches = [matches[game - 1]]

        counts = Counter()
        for match in matches:
            counts.update(match.kills_by_means)
        return counts

    def plot_kills_by_means(self, matches: Sequence[Match], output_path: Optional[str] = None,
                            game: Optional[int] = None) -> str:
        """
        Plot kills by means and save the chart as PNG.

        Args:
            matches: Finished matches in log order
            output_path: Optional output path for the generated image
            game: 1-indexed match number; all matches when None

        Returns:
            Path to the generated image
        """
        return self.plot_counts(self.count_means(matches, game), len(matches), output_path, game)

    def plot_counts(self, counts: Counter, match_count: int, output_path: Optional[str] = None,
                    game: Optional[int] = None) -> str:
        """Draw already counted kills by means; see plot_kills_by_means."""
        # Most frequent on top
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:self.top_n]
        labels: List[str] = [means for means, _ in reversed(ranked)]
        values: List[int] = [count for _, count in reversed(ranked)]

        positions = np.arange(len(labels))

        fig, ax = plt.subplots(figsize=(10, max(3, 0.4 * len(labels) + 1)))
        ax.barh(positions, values, color=self.bar_color, edgecolor='black', linewidth=0.5)
        ax.set_yticks(positions)
        ax.set_yticklabels(labels)
        ax.set_xlabel('Kills')

        scope = f"game_{game}" if game is not None else f"all {match_count} matches"
        ax.set_title(f"Kills by means ({scope})", fontsize=14, fontweight='bold')

        for position, value in zip(positions, values):
            ax.annotate(str(value), xy=(value, position), xytext=(3, 0),
                        textcoords='offset points', va='center', fontsize=8)

        if output_path is None:
            base_name = f"kills_by_means_game_{game}" if game is not None else "kills_by_means"
            output_path = os.path.join(self.output_dir, self.generate_timestamped_filename(base_name, "png"))
        output_path = self.resolve_path(output_path)
        self.ensure_dir(os.path.dirname(output_path))

        fig.savefig(output_path, dpi=self.default_output_dpi, bbox_inches='tight', facecolor='white')
        plt.close(fig)

        logger.info(f"Chart saved to: {output_path}")
        return output_path

    def run(self, log_file: str, output_path: Optional[str] = None, game: Optional[int] = None) -> Dict[str, Any]:
        """
        Parse a log file and chart its kills by means.

        Args:
            log_file: Path to the games.log file
            output_path: Optional output path for the generated image
            game: 1-indexed match number; all matches when None

        Returns:
            Dictionary with the output path and statistics
        """
        resolved_path = self.resolve_path(log_file)
        logger.info(f"Parsing log file: {resolved_path}")

        with open(resolved_path, 'r', encoding='utf-8', errors='replace') as log:
            matches = parse_log(log, world_name=self.world_name)

        counts = self.count_means(matches, game)
        output_file = self.plot_counts(counts, len(matches), output_path, game)

        return {
            "output_file": output_file,
            "match_count": len(matches),
            "means_count": len(counts),
            "kill_count": sum(counts.values()),
        }


def main():
    """Main function for the means plotter."""
    parser = argparse.ArgumentParser(
        description="Chart Quake III Arena kills by means of death from a games.log."
    )
    parser.add_argument("file", help="Path to the games.log file")
    parser.add_argument("--game", type=int, help="Only chart this match (1-indexed, as in game_N)")
    parser.add_argument("--output", help="Output image path (default: timestamped PNG in the output directory)")

    QuakeTool.add_standard_arguments(parser)
    args = parser.parse_args()

    try:
        config = QuakeTool.load_config(args.profile)
        plotter = MeansPlotter(config)
        result = plotter.run(args.file, args.output, args.game)

        if args.console:
            logger.info(f"Means plotting completed: {result}")

        return 0
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 1
    except (QuakeLogError, OSError) as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
