"""Tests for the engine-verifier command line."""

import json
import textwrap

import pytest

from engine_verifier.cli import (
    EXIT_COMPLIANT,
    EXIT_CONSTRUCTION_ERROR,
    EXIT_VIOLATIONS,
    build_parser,
    load_engine,
    main,
)
from engine_verifier.config import VerifierConfig
from engine_verifier.reference import ReferenceEngine

FAULTY_ENGINE_SOURCE = textwrap.dedent(
    """
    from engine_verifier.models.cards import CardType
    from engine_verifier.reference import ReferenceEngine


    class ExtraBugEngine(ReferenceEngine):
        def initial_supply(self):
            supply = super().initial_supply()
            supply[CardType.BUG] += 1
            return supply
    """
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "ENGINE_VERIFIER_SEED",
        "ENGINE_VERIFIER_NUM_GAMES",
        "ENGINE_VERIFIER_TRACE_DIR",
        "ENGINE_VERIFIER_LOG_LEVEL",
        "ENGINE_VERIFIER_CHECK_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Argument parsing
# =============================================================================


class TestParser:
    def test_defaults_come_from_config(self):
        parser = build_parser(VerifierConfig(seed=5, num_games=3))
        args = parser.parse_args(["reference"])
        assert args.seed == 5
        assert args.games == 3
        assert args.verbose is False
        assert args.trace_dir is None

    def test_log_level_case_insensitive(self):
        args = build_parser(VerifierConfig()).parse_args(["reference", "--log-level", "info"])
        assert args.log_level == "INFO"

    def test_reference_shortcut(self):
        assert load_engine("reference").engine_class is ReferenceEngine


# =============================================================================
# main()
# =============================================================================


class TestMain:
    """Tests for main()."""

    def test_reference_engine_is_compliant(self, capsys):
        assert main(["reference", "--games", "2"]) == EXIT_COMPLIANT
        out = capsys.readouterr().out
        assert "Engine: reference" in out
        assert "Games: 3 played, 3 passed" in out
        assert "Result: FULLY COMPLIANT" in out

    def test_faulty_engine_reports_violations(self, tmp_path, capsys):
        path = tmp_path / "faulty_engine.py"
        path.write_text(FAULTY_ENGINE_SOURCE)

        assert main([f"{path}:ExtraBugEngine", "--games", "1"]) == EXIT_VIOLATIONS
        out = capsys.readouterr().out
        assert "Result: NON-COMPLIANT (1 violation)" in out
        assert "Initial supply: Bug: expected 20 but found 21" in out

    def test_unloadable_engine(self, capsys):
        assert main(["no_such_package.engine:Engine", "--games", "1"]) == EXIT_CONSTRUCTION_ERROR
        assert "Engine construction failed" in capsys.readouterr().err

    def test_engine_file_with_syntax_error(self, tmp_path, capsys):
        path = tmp_path / "broken_engine.py"
        path.write_text("def oops(:\n    pass\n")
        assert main([f"{path}:Engine", "--games", "0"]) == EXIT_CONSTRUCTION_ERROR
        assert "Engine construction failed" in capsys.readouterr().err

    def test_engine_module_raising_on_import(self, tmp_path, monkeypatch, capsys):
        (tmp_path / "raising_engine.py").write_text("raise RuntimeError(\"boom at import\")\n")
        monkeypatch.syspath_prepend(str(tmp_path))
        assert main(["raising_engine:Engine", "--games", "0"]) == EXIT_CONSTRUCTION_ERROR
        assert "boom at import" in capsys.readouterr().err

    def test_trace_dir(self, tmp_path):
        assert main(["reference", "--games", "1", "--trace-dir", str(tmp_path)]) == EXIT_COMPLIANT
        data = json.loads((tmp_path / "game_0.json").read_text())
        assert data["game_index"] == 0

    def test_env_sets_game_count(self, monkeypatch, capsys):
        monkeypatch.setenv("ENGINE_VERIFIER_NUM_GAMES", "1")
        assert main(["reference"]) == EXIT_COMPLIANT
        assert "Games: 2 played" in capsys.readouterr().out

    def test_bad_env_value(self, monkeypatch, capsys):
        monkeypatch.setenv("ENGINE_VERIFIER_SEED", "abc")
        assert main(["reference"]) == EXIT_CONSTRUCTION_ERROR
        assert "ENGINE_VERIFIER_SEED" in capsys.readouterr().err

    @pytest.mark.parametrize("flag", [["--games", "-1"], ["--check-workers", "0"]])
    def test_invalid_arguments(self, flag):
        with pytest.raises(SystemExit) as exc_info:
            main(["reference", *flag])
        assert exc_info.value.code == 2
