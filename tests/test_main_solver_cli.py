"""
Tests for the command line front end (main_solver_cli).

Covers:
- Solving each bundled puzzle
- Trace / proof / statistics output
- Exit codes for solved, unsolvable and invalid input
"""

import json

import pytest

from main_solver_cli import (
    EXIT_INVALID,
    EXIT_NO_SOLUTION,
    EXIT_SOLVED,
    build_parser,
    main,
)


@pytest.fixture
def no_config(tmp_path):
    """Fixture: CLI arguments pointing at a config file that does not exist"""
    return ["--config", str(tmp_path / "missing.yaml")]


class TestParser:
    """Tests for argument parsing"""

    def test_defaults(self):
        args = build_parser().parse_args(["latin"])
        assert args.size == 4
        assert args.trace is None
        assert args.stats is None
        assert args.proof is False

    def test_no_trace_flag(self):
        assert build_parser().parse_args(["zebra", "--no-trace"]).trace is False

    def test_unknown_puzzle(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["chess"])
        assert exc_info.value.code == 2

    def test_negative_limit_rejected(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["latin", "--limit", "-1"])
        assert exc_info.value.code == 2
        assert "must be 0 or more" in capsys.readouterr().err


class TestSolving:
    """Tests for the happy paths"""

    def test_latin(self, capsys, no_config):
        assert main(["latin", "--size", "2"] + no_config) == EXIT_SOLVED
        out = capsys.readouterr().out
        assert "Solution 1:\n1 2\n2 1" in out
        assert "Found 2 solution(s) for the latin square of order 2." in out

    def test_limit(self, capsys, no_config):
        main(["latin", "--size", "3", "--limit", "1"] + no_config)
        out = capsys.readouterr().out
        assert "Solution 2:" not in out
        assert "... 11 more not shown" in out

    def test_zero_limit(self, capsys, no_config):
        main(["latin", "--size", "2", "--limit", "0"] + no_config)
        out = capsys.readouterr().out
        assert "Solution 1:" not in out
        assert "... 2 more not shown" in out

    def test_sudoku_example(self, capsys, no_config):
        assert main(["sudoku"] + no_config) == EXIT_SOLVED
        out = capsys.readouterr().out
        assert "5 3 4 6 7 8 9 1 2" in out
        assert "Found 1 solution(s) for the sudoku." in out

    def test_sudoku_grid_file(self, capsys, no_config, tmp_path):
        grid = tmp_path / "grid.txt"
        grid.write_text("55" + "." * 79, encoding="utf-8")
        assert main(["sudoku", "--grid", str(grid)] + no_config) == EXIT_NO_SOLUTION
        assert "Found 0 solution(s)" in capsys.readouterr().out

    def test_zebra(self, capsys, no_config):
        assert main(["zebra"] + no_config) == EXIT_SOLVED
        out = capsys.readouterr().out
        assert "The Japanese man owns the zebra." in out
        assert "The Norwegian drinks water." in out


class TestDiagnostics:
    """Tests for trace, proof and statistics output"""

    def test_stats(self, capsys, no_config):
        main(["latin", "--size", "2", "--stats"] + no_config)
        out = capsys.readouterr().out
        assert "Search statistics:" in out
        assert "  solutions: 2" in out

    def test_proof(self, capsys, no_config):
        main(["latin", "--size", "2", "--proof"] + no_config)
        out = capsys.readouterr().out
        assert "Search trace for: latin square of order 2" in out
        assert "[GUESS] [assumption]" in out
        assert "Derivation of solution 1:" in out
        assert "1. [START] all slots undetermined" in out
        assert "[GUESS] slot 0 = YES" in out
        assert "[OK] solution #1" in out

    def test_proof_json(self, capsys, no_config, tmp_path):
        target = tmp_path / "out" / "proof.json"
        main(["latin", "--size", "2", "--proof-json", str(target)] + no_config)
        out = capsys.readouterr().out
        assert f"Proof tree written to {target}" in out
        assert "Search trace for:" not in out

        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["query"] == "latin square of order 2"
        assert len(data["root_steps"]) == 1
        assert data["root_steps"][0]["step_type"] == "premise"

    def test_trace(self, capsys, no_config):
        main(["latin", "--size", "1", "--trace", "--loglevel", "debug"] + no_config)
        out = capsys.readouterr().out
        assert "Progress: Cell has exactly 1 symbol." in out
        assert "Solution!" in out

    def test_trace_without_loglevel(self, capsys, no_config):
        main(["latin", "--size", "1", "--trace"] + no_config)
        out = capsys.readouterr().out
        assert "Progress: Cell has exactly 1 symbol." in out
        assert "Solution!" in out

    def test_trace_from_config(self, capsys, tmp_path):
        config = tmp_path / "solver.yaml"
        config.write_text(
            "logging:\n  console_level: DEBUG\nsolver:\n  trace: true\n"
            "  show_statistics: true\n",
            encoding="utf-8",
        )
        main(["latin", "--size", "1", "--config", str(config)])
        out = capsys.readouterr().out
        assert "Solution!" in out
        assert "Search statistics:" in out

    def test_no_trace_overrides_config(self, capsys, tmp_path):
        config = tmp_path / "solver.yaml"
        config.write_text(
            "logging:\n  console_level: DEBUG\nsolver:\n  trace: true\n",
            encoding="utf-8",
        )
        main(["latin", "--size", "1", "--no-trace", "--config", str(config)])
        assert "Solution!" not in capsys.readouterr().out


class TestErrors:
    """Tests for invalid input and configuration"""

    @pytest.mark.parametrize("size", ["0", "6"])
    def test_latin_size_out_of_range(self, capsys, no_config, size):
        assert main(["latin", "--size", size] + no_config) == EXIT_INVALID
        assert "[ERROR] The puzzle input could not be read." in capsys.readouterr().err

    def test_bad_grid(self, capsys, no_config):
        assert main(["sudoku", "--grid", "123"] + no_config) == EXIT_INVALID
        assert "[ERROR]" in capsys.readouterr().err

    def test_bad_loglevel(self, capsys, no_config):
        assert main(["zebra", "--loglevel", "chatty"] + no_config) == EXIT_INVALID
        assert "Invalid configuration" in capsys.readouterr().err

    def test_malformed_config(self, capsys, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("solver: [unclosed\n", encoding="utf-8")
        assert main(["zebra", "--config", str(config)]) == EXIT_INVALID
        assert "Invalid configuration" in capsys.readouterr().err
