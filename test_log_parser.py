#!/usr/bin/env python3
"""
Tests for the quake-parse-log command line tool.
"""

import io
import json
import os
import sys

# Add the src directory to the path so we can import the modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from quake_log_tools.log import log_parser
from quake_log_tools.log.log_parser import (
    EXIT_OK, EXIT_OPEN_ERROR, EXIT_OUTPUT_ERROR, EXIT_PARSE_ERROR, QuakeLogParserTool
)

GAME_LOG = """  0:00 ------------------------------------------------------------
  0:00 InitGame: \\sv_hostname\\Code Miner Server
  1:47 Kill: 2 3 6: Isgalamido killed Mocinha by MOD_ROCKET
  1:48 Kill: 1022 4 22: <world> killed Zeh by MOD_TRIGGER_HURT
  2:00 ShutdownGame:
  2:00 ------------------------------------------------------------
  2:00 InitGame: \\sv_hostname\\Code Miner Server
  2:30 Kill: 3 2 10: Mocinha killed Isgalamido by MOD_RAILGUN
 12  2:40 ------------------------------------------------------------
"""


def _write_log(tmp_path, content=GAME_LOG):
    log_file = tmp_path / "games.log"
    log_file.write_text(content, encoding='utf-8')
    return str(log_file)


def _tool(tmp_path):
    return QuakeLogParserTool({'general': {'output_path': str(tmp_path / 'output')}})


def test_run_writes_report_to_stream(tmp_path):
    out = io.StringIO()
    assert _tool(tmp_path).run(_write_log(tmp_path), stream=out) == EXIT_OK

    report = json.loads(out.getvalue(), object_pairs_hook=list)
    assert [key for key, _ in report] == ["game_1", "game_2"]

    report = json.loads(out.getvalue())
    assert report["game_1"]["kills"] == {"Isgalamido": 1, "Mocinha": 0, "Zeh": -1}
    assert report["game_1"]["total_kills"] == 2
    assert report["game_2"]["kills"] == {"Isgalamido": 0, "Mocinha": 1}
    assert report["game_2"]["kills_by_means"] == {"MOD_RAILGUN": 1}


def test_run_writes_report_file(tmp_path):
    assert _tool(tmp_path).run(_write_log(tmp_path), output_file="report.json") == EXIT_OK

    report_file = tmp_path / 'output' / 'report.json'
    assert report_file.exists()
    with open(report_file, encoding='utf-8') as f:
        keys = [key for key, _ in json.load(f, object_pairs_hook=list)]
    assert keys == ["game_1", "game_2"]


def test_missing_file_is_open_error(tmp_path):
    assert _tool(tmp_path).run(str(tmp_path / "missing.log"), stream=io.StringIO()) == EXIT_OPEN_ERROR


def test_malformed_log_is_parse_error(tmp_path):
    out = io.StringIO()
    log_file = _write_log(tmp_path, "  0:00 InitGame:\nnot a log line\n  1:00 ShutdownGame:\n")
    assert _tool(tmp_path).run(log_file, stream=out) == EXIT_PARSE_ERROR
    assert out.getvalue() == ""


def test_truncated_log_is_parse_error(tmp_path):
    out = io.StringIO()
    log_file = _write_log(tmp_path, "  0:00 InitGame:\n  0:10 Kill: 2 3 6: A killed B by MOD_ROCKET\n")
    assert _tool(tmp_path).run(log_file, stream=out) == EXIT_PARSE_ERROR
    assert out.getvalue() == ""


def test_unwritable_output_is_output_error(tmp_path):
    # A directory named like the report makes the write fail
    (tmp_path / 'output' / 'report.json').mkdir(parents=True)
    assert _tool(tmp_path).run(_write_log(tmp_path), output_file="report.json") == EXIT_OUTPUT_ERROR


def test_custom_world_name_from_config(tmp_path):
    out = io.StringIO()
    log_file = _write_log(tmp_path, "  0:00 InitGame:\n  0:10 Kill: 1 2 3: <env> killed B by MOD_LAVA\n  0:20 ShutdownGame:\n")
    tool = QuakeLogParserTool({'parser': {'world_name': '<env>', 'indent': None}})
    assert tool.run(log_file, stream=out) == EXIT_OK
    assert json.loads(out.getvalue())["game_1"]["kills"] == {"B": -1}


def test_main_prints_report(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, 'argv', ['quake-parse-log', _write_log(tmp_path)])
    monkeypatch.setattr(QuakeLogParserTool, 'load_config', staticmethod(lambda profile=None: {}))

    assert log_parser.main() == EXIT_OK
    report = json.loads(capsys.readouterr().out)
    assert list(report) == ["game_1", "game_2"]


def test_non_utf8_bytes_are_replaced(tmp_path):
    out = io.StringIO()
    log_file = tmp_path / "games.log"
    log_file.write_bytes(
        b"  0:00 InitGame:\n"
        b"  0:10 Kill: 2 3 6: Jo\xe3o killed Zeh by MOD_ROCKET\n"
        b"  0:20 ShutdownGame:\n"
    )
    assert _tool(tmp_path).run(str(log_file), stream=out) == EXIT_OK

    report = json.loads(out.getvalue())
    assert report["game_1"]["kills"] == {"Jo\ufffdo": 1, "Zeh": 0}
    assert report["game_1"]["total_kills"] == 1
