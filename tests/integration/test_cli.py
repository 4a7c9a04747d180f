"""Command-line tests using Typer's test runner."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from sewdraft import __version__
from sewdraft.cli.app import app

runner = CliRunner()

MEASUREMENTS = {
    "neck": 380,
    "chest": 1000,
    "hips": 1000,
    "shoulder_to_shoulder": 450,
    "hps_to_waist_back": 420,
    "waist_to_hips": 200,
    "biceps": 300,
    "shoulder_to_wrist": 600,
}


@pytest.fixture
def input_file(tmp_path: Path) -> Path:
    """Valid tee input file."""
    path = tmp_path / "alice.json"
    path.write_text(
        json.dumps({"measurements": MEASUREMENTS, "options": {"back_neck_cutout": 0.2}}),
        encoding="utf-8",
    )
    return path


class TestInfoCommands:
    """Tests for flags that exit before drafting."""

    def test_version(self) -> None:
        """Test --version output."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_list_designs(self) -> None:
        """Test that bundled designs are listed."""
        result = runner.invoke(app, ["--list-designs"])
        assert result.exit_code == 0
        assert "tee" in result.output
        assert "back, front, sleeve" in result.output


class TestDraftCommand:
    """Tests for drafting from input files."""

    def test_draft_writes_pattern(self, input_file: Path) -> None:
        """Test the default output name and its contents."""
        result = runner.invoke(app, ["tee", "-i", str(input_file)])
        assert result.exit_code == 0, result.output

        output = input_file.parent / "alice-tee.json"
        assert output.exists()
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["design"] == "tee"
        assert list(data["parts"]) == ["back", "front", "sleeve"]
        assert data["store"]["sleevecap_ease"] == 0
        assert data["generator"]["version"] == __version__

    def test_explicit_output(self, input_file: Path, tmp_path: Path) -> None:
        """Test -o with paperless and seam allowance."""
        output = tmp_path / "out" / "pattern.json"
        output.parent.mkdir()
        result = runner.invoke(
            app,
            ["tee", "-i", str(input_file), "-o", str(output), "--paperless", "--sa", "10", "-q"],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert "sa" in data["parts"]["back"]["paths"]
        assert "dim_armhole" in data["parts"]["back"]["paths"]

    def test_dry_run_writes_nothing(self, input_file: Path) -> None:
        """Test that --dry-run validates without writing."""
        result = runner.invoke(app, ["tee", "-i", str(input_file), "--dry-run", "--strict"])
        assert result.exit_code == 0, result.output
        assert "Dry run complete" in result.output
        assert not (input_file.parent / "alice-tee.json").exists()


class TestDraftErrors:
    """Tests for error exits."""

    def test_missing_design(self, input_file: Path) -> None:
        """Test that a design name is required."""
        result = runner.invoke(app, ["-i", str(input_file)])
        assert result.exit_code == 1
        assert "Missing design name" in result.output

    def test_unknown_design(self, input_file: Path) -> None:
        """Test that unknown designs list the available ones."""
        result = runner.invoke(app, ["ballgown", "-i", str(input_file)])
        assert result.exit_code == 1
        assert "tee" in result.output

    def test_missing_input(self, tmp_path: Path) -> None:
        """Test that a nonexistent input file is reported."""
        result = runner.invoke(app, ["tee", "-i", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "Input file not found" in result.output

    def test_no_input(self) -> None:
        """Test that at least one input is required."""
        result = runner.invoke(app, ["tee"])
        assert result.exit_code == 1
        assert "No input file given" in result.output

    def test_verbose_and_quiet(self, input_file: Path) -> None:
        """Test that --verbose and --quiet conflict."""
        result = runner.invoke(app, ["tee", "-i", str(input_file), "-v", "-q"])
        assert result.exit_code == 1

    def test_invalid_measurement(self, tmp_path: Path) -> None:
        """Test that invalid measurements fail without writing."""
        path = tmp_path / "bob.json"
        path.write_text(
            json.dumps({"measurements": dict(MEASUREMENTS, chest=-5)}), encoding="utf-8"
        )
        result = runner.invoke(app, ["tee", "-i", str(path)])
        assert result.exit_code == 1
        assert "chest" in result.output
        assert not (tmp_path / "bob-tee.json").exists()

    def test_malformed_input(self, tmp_path: Path) -> None:
        """Test that broken JSON is reported as an I/O failure."""
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        result = runner.invoke(app, ["tee", "-i", str(path)])
        assert result.exit_code == 1
        assert "invalid JSON" in result.output

    def test_output_with_many_inputs(self, input_file: Path, tmp_path: Path) -> None:
        """Test that -o is refused for a batch."""
        other = tmp_path / "carol.json"
        other.write_text(input_file.read_text(encoding="utf-8"), encoding="utf-8")
        result = runner.invoke(
            app,
            ["tee", "-i", str(input_file), "-i", str(other), "-o", str(tmp_path / "x.json")],
        )
        assert result.exit_code == 1
        assert "single input" in result.output

    def test_design_mismatch(self, tmp_path: Path) -> None:
        """Test that an input written for another design is refused."""
        path = tmp_path / "dana.json"
        path.write_text(
            json.dumps({"design": "skirt", "measurements": MEASUREMENTS}), encoding="utf-8"
        )
        for extra in ([], ["--dry-run"]):
            result = runner.invoke(app, ["tee", "-i", str(path), *extra])
            assert result.exit_code == 1
            assert "skirt" in result.output
        assert not (tmp_path / "dana-tee.json").exists()

    def test_design_mismatch_in_batch(self, input_file: Path, tmp_path: Path) -> None:
        """Test that a batch is refused before drafting when one input names another design."""
        other = tmp_path / "erin.json"
        other.write_text(
            json.dumps({"design": "skirt", "measurements": MEASUREMENTS}), encoding="utf-8"
        )
        result = runner.invoke(app, ["tee", "-i", str(input_file), "-i", str(other), "-q"])
        assert result.exit_code == 1
        assert not (tmp_path / "alice-tee.json").exists()
        assert not (tmp_path / "erin-tee.json").exists()


class TestBatchDraft:
    """Tests for drafting several inputs at once."""

    def test_writes_one_pattern_per_input(self, input_file: Path, tmp_path: Path) -> None:
        """Test that every input in a batch gets its own pattern file."""
        other = tmp_path / "carol.json"
        other.write_text(
            json.dumps({"design": "tee", "measurements": MEASUREMENTS}), encoding="utf-8"
        )
        result = runner.invoke(
            app, ["tee", "-i", str(input_file), "-i", str(other), "-j", "2"]
        )
        assert result.exit_code == 0, result.output
        assert "2 patterns" in result.output
        for name in ("alice-tee.json", "carol-tee.json"):
            data = json.loads((tmp_path / name).read_text(encoding="utf-8"))
            assert list(data["parts"]) == ["back", "front", "sleeve"]
