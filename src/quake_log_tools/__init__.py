"""
Quake Log Tools - Python package for Quake III Arena server logs

This package turns games.log files into per-match kill statistics and
provides tools around them: downloading logs, ranking players across
matches and charting kills by means of death.

The package uses the config module for configuration management.
"""

__version__ = '1.0.0'
