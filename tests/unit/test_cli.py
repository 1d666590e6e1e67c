"""Unit tests for the command-line interface."""

from typer.testing import CliRunner

from curvedgeom import __version__
from curvedgeom.cli.app import app, count_control_points, read_records
from curvedgeom.io import WKTReader

runner = CliRunner()

ARC = "CIRCULARSTRING (0 0, 1 1, 2 0)"


class TestReadRecords:
    """Tests for splitting input into records."""

    def test_inline_geometry(self):
        """Test that a geometry string is one record."""
        assert read_records(ARC) == [ARC]

    def test_file_skips_blank_and_comment_lines(self, tmp_path):
        """Test reading one geometry per line from a file."""
        path = tmp_path / "input.wkt"
        path.write_text(f"# arcs\n{ARC}\n\nPOINT (1 2)\n", encoding="utf-8")
        assert read_records(str(path)) == [ARC, "POINT (1 2)"]


class TestCountControlPoints:
    """Tests for count_control_points()."""

    def test_curved_and_plain(self):
        """Test counts for nested and plain geometries."""
        reader = WKTReader()
        assert count_control_points(reader.read(ARC)) == 3
        compound = reader.read("COMPOUNDCURVE (CIRCULARSTRING (1 0, 0 1, -1 0), (-1 0, 2 0))")
        assert count_control_points(compound) == 5
        assert count_control_points(reader.read("LINESTRING (0 0, 1 1)")) == 2


class TestLinearizeCommand:
    """Tests for the linearize command."""

    def test_wkt_output(self):
        """Test linearizing an inline geometry to WKT."""
        result = runner.invoke(app, ["linearize", ARC])
        assert result.exit_code == 0
        assert result.stdout.startswith("LINESTRING (0 0, ")

    def test_wkb_output(self):
        """Test hex WKB output."""
        result = runner.invoke(app, ["linearize", ARC, "--wkb"])
        assert result.exit_code == 0
        assert result.stdout.startswith("0102000000")

    def test_segment_length_adds_vertices(self):
        """Test that a shorter chord gives more vertices."""
        coarse = runner.invoke(app, ["linearize", ARC])
        fine = runner.invoke(app, ["linearize", ARC, "-s", "0.1"])
        assert fine.exit_code == 0
        assert fine.stdout.count(",") > coarse.stdout.count(",")

    def test_quadrant_segments(self):
        """Test that a half circle gives two quadrants of segments."""
        result = runner.invoke(app, ["linearize", "-q", "4", "CIRCULARSTRING (-1 0, 0 1, 1 0)"])
        assert result.exit_code == 0
        assert result.stdout.strip().count(",") == 8

    def test_plain_geometry_passes_through(self):
        """Test that a plain geometry is written unchanged."""
        result = runner.invoke(app, ["linearize", "POINT (1 2)"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "POINT (1 2)"

    def test_hex_wkb_input(self):
        """Test that hex WKB input is detected."""
        result = runner.invoke(app, ["linearize", "0101000000000000000000F03F0000000000000040"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "POINT (1 2)"

    def test_invalid_geometry_fails(self):
        """Test that a parse error sets the exit code."""
        result = runner.invoke(app, ["linearize", "CIRCULARSTRING (0 0, 1 1)"])
        assert result.exit_code == 1
        assert "Geometry 1" in result.stdout

    def test_file_input(self, tmp_path):
        """Test one output line per input record."""
        path = tmp_path / "input.wkt"
        path.write_text(f"# two geometries\n{ARC}\nPOINT (1 2)\n", encoding="utf-8")
        result = runner.invoke(app, ["linearize", str(path)])
        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("LINESTRING")
        assert lines[1] == "POINT (1 2)"

    def test_empty_input_fails(self, tmp_path):
        """Test that a file without geometries is an error."""
        path = tmp_path / "empty.wkt"
        path.write_text("# nothing here\n", encoding="utf-8")
        result = runner.invoke(app, ["linearize", str(path)])
        assert result.exit_code == 1

    def test_output_file(self, tmp_path):
        """Test writing results to a file."""
        out = tmp_path / "out.wkt"
        result = runner.invoke(app, ["linearize", ARC, "-o", str(out)])
        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8").startswith("LINESTRING (0 0, ")
        assert "Complete" in result.stdout


class TestInfoCommand:
    """Tests for the info command."""

    def test_table(self):
        """Test the summary of a circular string."""
        result = runner.invoke(app, ["info", ARC])
        assert result.exit_code == 0
        assert "CircularString" in result.stdout
        assert "Control points" in result.stdout

    def test_invalid_geometry_fails(self):
        """Test that a parse error sets the exit code."""
        result = runner.invoke(app, ["info", "CURVEPOLYGON (CIRCULARSTRING (0 0, 1 1, 2 0))"])
        assert result.exit_code == 1


class TestGlobalOptions:
    """Tests for options shared by all commands."""

    def test_version(self):
        """Test --version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"curvedgeom v{__version__}" in result.stdout

    def test_invalid_log_level(self):
        """Test that an unknown log level is rejected."""
        result = runner.invoke(app, ["--log-level", "LOUD", "info", ARC])
        assert result.exit_code == 1

    def test_log_file(self, tmp_path):
        """Test that --log-file creates the log."""
        log = tmp_path / "run.log"
        result = runner.invoke(app, ["--log-file", str(log), "linearize", ARC])
        assert result.exit_code == 0
        assert log.exists()

    def test_log_level_is_case_insensitive(self):
        """Test that a lower case level is accepted."""
        result = runner.invoke(app, ["--log-level", "error", "info", ARC])
        assert result.exit_code == 0
