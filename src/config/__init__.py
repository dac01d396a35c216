# Configuration package initialization
"""
Quake Log Tools - Configuration System

This package provides a lightweight configuration system for the Quake Log Tools.

Quick Usage:
    from config import Config

    config = Config(profile='my_server')
    value = config.get('parser.world_name')

Profiles live in the 'profiles' directory next to this file, see
profiles/default.json.example for the available keys.
"""

from config.config import Config, DEFAULTS

__all__ = ['Config', 'DEFAULTS']
