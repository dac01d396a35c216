"""
Quake Analysis Tools

This package provides analytical tools built on the match parser,
including cross-match kill ranking and kills-by-means charts.
"""

from .kill_ranking import KillRanking
from .means_plotter import MeansPlotter

__all__ = [
    'KillRanking',
    'MeansPlotter',
]
