"""
Unit tests for CLI commands.

Tests cover:
- validate command
- list and show commands
- play command
"""

import textwrap

from typer.testing import CliRunner

from bifurcation.cli.app import app

runner = CliRunner()


class TestValidateCommand:
    """Tests for validate command."""

    def test_validate_success(self, kb_path):
        """Validate succeeds on the bundled puzzles."""
        result = runner.invoke(app, ["validate", kb_path])

        assert result.exit_code == 0
        assert "Loaded 16 puzzle(s)" in result.stdout
        assert "All validations passed" in result.stdout

    def test_validate_missing_path(self, tmp_path):
        """A missing path exits with an error."""
        result = runner.invoke(app, ["validate", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "Path not found" in result.stdout

    def test_validate_schema_error(self, tmp_path):
        """Schema errors are reported by the loader."""
        (tmp_path / "bad.yaml").write_text("id: BAD\nheight: 1\nlayout: [P]\n", encoding="utf-8")

        result = runner.invoke(app, ["validate", str(tmp_path)])

        assert result.exit_code == 1
        assert "Failed to load data" in result.stdout

    def test_validate_reports_unsolvable(self, tmp_path):
        """More active targets than boxes is flagged."""
        (tmp_path / "short.yaml").write_text(
            textwrap.dedent(
                """
                id: SHORT
                width: 5
                height: 1
                layout: ["P$.. "]
                """
            ),
            encoding="utf-8",
        )

        result = runner.invoke(app, ["validate", str(tmp_path)])

        assert result.exit_code == 1
        assert "SHORT" in result.stdout

    def test_validate_reports_unsupported_feature(self, tmp_path):
        """Per-branch walls are reported as unsupported."""
        (tmp_path / "walls.yaml").write_text(
            textwrap.dedent(
                """
                id: WALLS
                bifurcation_layer: 2
                width: 3
                height: 1
                layout: ["P$."]
                walls_per_branch:
                  0: [{x: 2, y: 0}]
                """
            ),
            encoding="utf-8",
        )

        result = runner.invoke(app, ["validate", str(tmp_path)])

        assert result.exit_code == 1
        assert "walls_per_branch" in result.stdout


class TestListAndShow:
    """Tests for list and show commands."""

    def test_list_layer(self, kb_path):
        result = runner.invoke(app, ["list", "--layer", "2", "--path", kb_path])

        assert result.exit_code == 0
        assert "L2-S1" in result.stdout
        assert "L1-F1" not in result.stdout

    def test_list_layer_and_category(self, kb_path):
        result = runner.invoke(app, ["list", "--layer", "2", "--category", "pressure", "--path", kb_path])

        assert result.exit_code == 0
        assert "L2-P1" in result.stdout
        assert "L2-S1" not in result.stdout
        assert "L1-P1" not in result.stdout

    def test_show_names_next_puzzle(self, kb_path):
        last = runner.invoke(app, ["show", "L1-FP1", "--path", kb_path])
        result = runner.invoke(app, ["show", "L1-P1", "--path", kb_path])

        assert "Next: L1-P2" in result.stdout
        assert "Next:" not in last.stdout

    def test_list_empty(self, kb_path):
        result = runner.invoke(app, ["list", "--layer", "3", "--path", kb_path])

        assert result.exit_code == 0
        assert "No puzzles found" in result.stdout

    def test_show_puzzle(self, kb_path):
        result = runner.invoke(app, ["show", "L1-P1", "--path", kb_path])

        assert result.exit_code == 0
        assert "Pressure 1: First Plate" in result.stdout
        assert "Branch 0" in result.stdout

    def test_show_unknown(self, kb_path):
        result = runner.invoke(app, ["show", "nonexistent", "--path", kb_path])

        assert result.exit_code == 2
        assert "Puzzle not found" in result.stdout


class TestPlayCommand:
    """Tests for play command."""

    def test_play_solves_first_plate(self, kb_path):
        result = runner.invoke(app, ["play", "L1-P1", "--moves", "d,d,d,d,s", "--path", kb_path])

        assert result.exit_code == 0
        assert "PUZZLE SOLVED!" in result.stdout
        assert "Solved: yes" in result.stdout
        assert "Moves: 5" in result.stdout

    def test_play_steps(self, kb_path):
        result = runner.invoke(app, ["play", "L1-P1", "-m", "w", "-m", "s", "--steps", "--path", kb_path])

        assert result.exit_code == 0
        assert "rejected (wall)" in result.stdout
        assert "ok (clear)" in result.stdout
        assert "Solved: no" in result.stdout

    def test_play_with_config(self, kb_path, tmp_path):
        config = tmp_path / "engine.yaml"
        config.write_text("engine:\n  max_history: 1\n", encoding="utf-8")

        result = runner.invoke(
            app, ["play", "L1-P1", "--moves", "d d z z", "--config", str(config), "--path", kb_path]
        )

        assert result.exit_code == 0
        assert "Moves: 1" in result.stdout

    def test_play_unknown(self, kb_path):
        result = runner.invoke(app, ["play", "L0-X", "--path", kb_path])

        assert result.exit_code == 2
