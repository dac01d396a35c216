#!/usr/bin/env python3
"""
Tests for the kills-by-means chart tool.
"""

import os
import sys

import matplotlib
matplotlib.use('Agg')

import pytest

# Add the src directory to the path so we can import the modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from quake_log_tools.log.match_parser import Match
from quake_log_tools.tools.means_plotter import MeansPlotter

MATCHES = [
    Match(3, ["A", "B"], {"A": 1, "B": -1}, {"MOD_ROCKET": 2, "MOD_FALLING": 1}),
    Match(2, ["A", "C"], {"A": 1, "C": 0}, {"MOD_ROCKET": 1, "MOD_RAILGUN": 1}),
]


@pytest.fixture
def plotter(tmp_path):
    config = {
        'general': {
            'output_path': str(tmp_path / 'output'),
            'log_download_path': str(tmp_path / 'logs'),
        },
        'plot': {'dpi': 50},
    }
    return MeansPlotter(config)


def test_count_means_all_matches(plotter):
    counts = plotter.count_means(MATCHES)
    assert counts == {"MOD_ROCKET": 3, "MOD_FALLING": 1, "MOD_RAILGUN": 1}


def test_count_means_single_game(plotter):
    assert plotter.count_means(MATCHES, game=2) == {"MOD_ROCKET": 1, "MOD_RAILGUN": 1}


def test_count_means_rejects_unknown_game(plotter):
    with pytest.raises(ValueError):
        plotter.count_means(MATCHES, game=3)
    with pytest.raises(ValueError):
        plotter.count_means(MATCHES, game=0)


def test_plot_writes_png(plotter, tmp_path):
    output = plotter.plot_kills_by_means(MATCHES, str(tmp_path / "chart.png"))
    assert output == str(tmp_path / "chart.png")
    with open(output, 'rb') as f:
        assert f.read(8) == b'\x89PNG\r\n\x1a\n'


def test_run_uses_output_directory(plotter, tmp_path):
    log_file = tmp_path / "games.log"
    log_file.write_text(
        "  0:00 InitGame:\n"
        "  0:10 Kill: 1022 2 19: <world> killed Isgalamido by MOD_FALLING\n"
        "  0:20 Kill: 2 3 6: Isgalamido killed Mocinha by MOD_ROCKET\n"
        "  0:30 ShutdownGame:\n",
        encoding='utf-8'
    )
    result = plotter.run(str(log_file), game=1)

    assert result["match_count"] == 1
    assert result["means_count"] == 2
    assert result["kill_count"] == 2
    assert os.path.dirname(result["output_file"]) == str(tmp_path / 'output')
    assert os.path.exists(result["output_file"])


def test_bar_color_defaults(plotter):
    assert plotter.bar_color == 'firebrick'


def test_run_counts_means_once(plotter, tmp_path, monkeypatch):
    log_file = tmp_path / "games.log"
    log_file.write_text("  0:00 InitGame:\n  0:10 Kill: 2 3 6: A killed B by MOD_ROCKET\n  0:20 ShutdownGame:\n",
                        encoding='utf-8')
    calls = []
    count_means = plotter.count_means

    def counting(matches, game=None):
        calls.append(game)
        return count_means(matches, game)

    monkeypatch.setattr(plotter, 'count_means', counting)
    result = plotter.run(str(log_file), str(tmp_path / "chart.png"))

    assert calls == [None]
    assert result["kill_count"] == 1
