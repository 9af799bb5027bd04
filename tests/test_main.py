"""
Tests for the command line entry point and settings persistence
"""

import json
import logging
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import main
from starbattle.engine import InvalidBoardError, Mark
from starbattle.settings import DEFAULT_SETTINGS, load_settings, save_settings


def _row_region_lines(size):
    return [" ".join([str(r)] * size) for r in range(size)]


def _write_board(path, size, required, cells=None):
    data = {"required_per_unit": required, "regions": _row_region_lines(size)}
    if cells is not None:
        data["cells"] = cells
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run in an empty directory so no stray config.json is picked up."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(main, "configure_logging", lambda debug, log_file=None: None)
    return tmp_path


# =============================================================================
# Board loading
# =============================================================================

def test_load_board_accepts_strings_and_lists(tmp_path):
    state = main.load_board(_write_board(tmp_path / "a.json", 4, 1, cells=["*...", "....", "....", "...."]))
    assert state.size == 4
    assert state.get_cell(0, 0) is Mark.CONFIRMED

    listed = tmp_path / "b.json"
    listed.write_text(json.dumps({"regions": [[0, 0], [1, 1]]}), encoding="utf-8")
    state = main.load_board(listed)
    assert state.required_per_unit == 1
    assert state.unset_cells() == [(0, 0), (0, 1), (1, 0), (1, 1)]


def test_load_board_accepts_matching_size(tmp_path):
    path = tmp_path / "sized.json"
    path.write_text(json.dumps({"size": 2, "regions": ["0 0", "1 1"]}), encoding="utf-8")

    assert main.load_board(path).size == 2


@pytest.mark.parametrize("content", [
    "{not json",
    "[1, 2]",
    json.dumps({"required_per_unit": 1}),
    json.dumps({"required_per_unit": "two", "regions": ["0"]}),
    json.dumps({"required_per_unit": 1, "regions": ["0 0", "0"]}),
    json.dumps({"size": 3, "required_per_unit": 1, "regions": ["0 0", "1 1"]}),
    json.dumps({"size": "big", "required_per_unit": 1, "regions": ["0 0", "1 1"]}),
])
def test_load_board_rejects_malformed_files(tmp_path, content):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(InvalidBoardError):
        main.load_board(path)


# =============================================================================
# Commands
# =============================================================================

def test_count_command(tmp_path, capsys):
    board = _write_board(tmp_path / "board.json", 4, 1)

    assert main.main(["count", str(board)]) == 0

    out = capsys.readouterr().out
    assert "count=2 timed_out=False capped_at_max=False aborted=False" in out
    assert "stop=exhausted" in out


def test_count_command_with_cooperative_counter_and_cap(tmp_path, capsys):
    board = _write_board(tmp_path / "board.json", 5, 1)

    assert main.main(["--counter", "cooperative", "count", str(board), "--max-count", "3"]) == 0

    out = capsys.readouterr().out
    assert "count=3 timed_out=False capped_at_max=True" in out


def test_count_command_rejects_bad_limits(tmp_path):
    board = _write_board(tmp_path / "board.json", 4, 1)

    assert main.main(["count", str(board), "--max-count", "0"]) == 2


def test_verify_command(tmp_path, capsys, solved_10x10):
    solved_10x10.set_cell(0, 0, Mark.UNSET)
    board = _write_board(tmp_path / "board.json", 10, 2, cells=solved_10x10.to_strings())

    assert main.main(["verify", str(board), "0", "0", "star"]) == 0

    out = capsys.readouterr().out
    assert "status=proved" in out
    assert "therefore (0,0) must be a star." in out


def test_verify_command_rejects_cells_outside_the_board(tmp_path):
    board = _write_board(tmp_path / "board.json", 4, 1)

    assert main.main(["verify", str(board), "4", "0", "cross"]) == 2


def test_solve_command(tmp_path, capsys):
    board = _write_board(tmp_path / "board.json", 10, 2)

    assert main.main(["solve", str(board)]) == 0

    lines = capsys.readouterr().out.split()
    assert len(lines) == 10
    assert all(line.count("*") == 2 for line in lines)


def test_solve_command_without_solution(tmp_path, capsys):
    board = _write_board(tmp_path / "board.json", 4, 2)

    assert main.main(["solve", str(board)]) == 1
    assert "No solution" in capsys.readouterr().out


def test_invalid_board_exits_with_status_2(tmp_path):
    path = tmp_path / "board.json"
    path.write_text("{}", encoding="utf-8")

    assert main.main(["count", str(path)]) == 2


def test_rule_violations_are_logged(tmp_path, caplog):
    board = _write_board(tmp_path / "board.json", 4, 1, cells=["*.*.", "....", "....", "...."])

    with caplog.at_level(logging.WARNING):
        assert main.main(["count", str(board)]) == 0

    assert "Row 1 has 2 stars (maximum is 1)." in caplog.text


def test_settings_supply_defaults(tmp_path, capsys):
    save_settings({"counter_name": "cooperative"}, tmp_path / "config.json")
    board = _write_board(tmp_path / "board.json", 4, 1)

    assert main.main(["count", str(board)]) == 0
    assert "count=2" in capsys.readouterr().out


# =============================================================================
# Settings
# =============================================================================

def test_load_settings_missing_file(tmp_path):
    assert load_settings(tmp_path / "missing.json") == DEFAULT_SETTINGS


def test_settings_round_trip_merges_defaults(tmp_path):
    path = tmp_path / "config.json"
    save_settings({"per_check_timeout_ms": 500, "debug_enabled": True}, path)

    settings = load_settings(path)

    assert settings["per_check_timeout_ms"] == 500
    assert settings["debug_enabled"] is True
    assert settings["counter_name"] == DEFAULT_SETTINGS["counter_name"]


@pytest.mark.parametrize("content", ["{broken", "[1, 2, 3]"])
def test_load_settings_falls_back_on_bad_content(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")

    assert load_settings(path) == DEFAULT_SETTINGS



def test_unnamed_counter_in_settings_uses_default(tmp_path, capsys):
    save_settings({"counter_name": None}, tmp_path / "config.json")
    board = _write_board(tmp_path / "board.json", 4, 1)

    assert main.main(["count", str(board)]) == 0
    assert "count=2" in capsys.readouterr().out
