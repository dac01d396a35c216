#!/usr/bin/env python3
"""
Tests for the kill ranking tool.
"""

import csv
import os
import sys

import pandas as pd
import pytest

# Add the src directory to the path so we can import the modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from quake_log_tools.log.errors import UnterminatedMatchError
from quake_log_tools.log.match_parser import Match
from quake_log_tools.tools.kill_ranking import KillRanking, PlayerRanking

GAME_LOG = """  0:00 InitGame: \\sv_hostname\\Code Miner Server
  1:47 Kill: 2 3 6: Isgalamido killed Mocinha by MOD_ROCKET
  1:50 Kill: 2 4 6: Isgalamido killed Zeh by MOD_ROCKET
  1:48 Kill: 1022 4 22: <world> killed Zeh by MOD_TRIGGER_HURT
  2:00 ShutdownGame:
  2:00 InitGame: \\sv_hostname\\Code Miner Server
  2:30 Kill: 3 2 10: Mocinha killed Isgalamido by MOD_RAILGUN
  2:40 ShutdownGame:
"""


@pytest.fixture
def ranking(tmp_path):
    config = {
        'general': {
            'output_path': str(tmp_path / 'output'),
            'log_download_path': str(tmp_path / 'logs'),
        }
    }
    return KillRanking(config)


def _write_log(tmp_path, content=GAME_LOG):
    log_file = tmp_path / "games.log"
    log_file.write_text(content, encoding='utf-8')
    return str(log_file)


def test_rank_players_sums_differentials_across_matches(ranking):
    matches = [
        Match(2, ["A", "B"], {"A": 2, "B": 0}, {"MOD_ROCKET": 2}),
        Match(2, ["A", "C"], {"A": -1, "C": 1}, {"MOD_FALLING": 1, "MOD_SHOTGUN": 1}),
    ]
    rankings = ranking.rank_players(matches)

    assert [r.player for r in rankings] == ["A", "C", "B"]
    assert rankings[0].net_kills == 1
    assert rankings[0].matches == 2
    assert rankings[0].average == 0.5


def test_ties_are_ordered_by_name(ranking):
    matches = [Match(2, ["Zeh", "Mocinha"], {"Zeh": 1, "Mocinha": 1}, {"MOD_ROCKET": 2})]
    assert [r.player for r in ranking.rank_players(matches)] == ["Mocinha", "Zeh"]


def test_average_without_matches():
    assert PlayerRanking("nobody").average == 0.0


def test_run_saves_csv(ranking, tmp_path):
    result = ranking.run(_write_log(tmp_path))

    assert result["success"] is True
    assert result["match_count"] == 2
    assert result["player_count"] == 3
    assert result["excel_file"] is None

    with open(result["output_file"], newline='') as f:
        rows = list(csv.DictReader(f))

    assert [row["Player"] for row in rows] == ["Isgalamido", "Mocinha", "Zeh"]
    assert [row["Net Kills"] for row in rows] == ["2", "1", "-1"]
    assert rows[0]["Matches"] == "2"


def test_run_saves_excel(ranking, tmp_path):
    result = ranking.run(_write_log(tmp_path), excel=True)

    assert os.path.exists(result["excel_file"])
    df = pd.read_excel(result["excel_file"], sheet_name='Ranking')
    assert list(df.columns) == KillRanking.CSV_HEADERS
    assert df["Player"].tolist() == ["Isgalamido", "Mocinha", "Zeh"]


def test_run_without_players_is_unsuccessful(ranking, tmp_path):
    result = ranking.run(_write_log(tmp_path, "  0:00 InitGame:\n  1:00 ShutdownGame:\n"))
    assert result["success"] is False
    assert result["match_count"] == 1
    assert result["output_file"] is None


def test_run_propagates_parse_errors(ranking, tmp_path):
    with pytest.raises(UnterminatedMatchError):
        ranking.run(_write_log(tmp_path, "  0:00 InitGame:\n"))


def test_run_accepts_latin1_names(ranking, tmp_path):
    log_file = tmp_path / "games.log"
    log_file.write_bytes(
        b"  0:00 InitGame:\n"
        b"  0:10 Kill: 2 3 6: Jo\xe3o killed Zeh by MOD_ROCKET\n"
        b"  0:20 ShutdownGame:\n"
    )
    result = ranking.run(str(log_file))
    assert result["success"] is True
    assert result["player_count"] == 2
