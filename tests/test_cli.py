"""Tests for the data-convert command line."""

import json

import pytest
from click.testing import CliRunner

from tools.format_converter import convert
from tools.format_converter.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def person_files(tmp_path, examples):
    """Write each sample to a file with its extension."""
    paths = {}
    for fmt, text in examples.items():
        path = tmp_path / f"person.{fmt}"
        path.write_text(text, encoding="utf-8")
        paths[fmt] = path
    return paths


class TestDetect:
    """Test --detect."""

    @pytest.mark.parametrize("fmt", ["json", "yaml", "xml", "toml"])
    def test_detects_files(self, runner, person_files, fmt):
        """Test each sample file is recognised."""
        result = runner.invoke(main, [str(person_files[fmt]), "--detect"])
        assert result.exit_code == 0
        assert fmt in result.output

    def test_detect_stdin(self, runner, toml_example):
        """Test detection of piped input."""
        result = runner.invoke(main, ["-", "--detect"], input=toml_example)
        assert result.exit_code == 0
        assert "toml" in result.output

    def test_undetectable(self, runner):
        """Test free text cannot be detected."""
        result = runner.invoke(main, ["-", "--detect"], input="just some words")
        assert result.exit_code == 1
        assert "Could not auto-detect" in result.output


class TestCheck:
    """Test --check."""

    def test_valid(self, runner, person_files):
        """Test a valid file passes."""
        result = runner.invoke(main, [str(person_files["yaml"]), "--check"])
        assert result.exit_code == 0
        assert "Valid YAML" in result.output

    def test_invalid(self, runner, tmp_path):
        """Test an invalid file fails with exit code 1."""
        path = tmp_path / "broken.toml"
        path.write_text('a = 1\nnot toml at all', encoding="utf-8")
        result = runner.invoke(main, [str(path), "--check"])
        assert result.exit_code == 1
        assert "Invalid TOML" in result.output

    def test_explicit_format(self, runner, person_files):
        """Test --from overrides the extension."""
        result = runner.invoke(main, [str(person_files["json"]), "--from", "yaml", "--check"])
        assert result.exit_code == 1
        assert "Invalid YAML" in result.output


class TestConvert:
    """Test conversion runs."""

    def test_to_stdout(self, runner, person_files):
        """Test JSON to YAML on stdout."""
        result = runner.invoke(main, [str(person_files["json"]), "--to", "yaml"])
        assert result.exit_code == 0
        assert "name: Alice Johnson" in result.output
        assert 'zip: "02101"' in result.output

    def test_to_file(self, runner, person_files, tmp_path, toml_example):
        """Test --output writes the converted text."""
        target = tmp_path / "out.json"
        result = runner.invoke(
            main, [str(person_files["toml"]), "--to", "json", "--output", str(target)]
        )
        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8") == convert(toml_example, "toml", "json").output
        assert json.loads(target.read_text(encoding="utf-8"))["courses"][0] == {"name": "Math"}

    def test_stdin(self, runner, yaml_example):
        """Test reading input from stdin."""
        result = runner.invoke(main, ["-", "--from", "yaml", "--to", "toml"], input=yaml_example)
        assert result.exit_code == 0
        assert "[address]" in result.output

    def test_case_insensitive_choice(self, runner, person_files):
        """Test format choices ignore case."""
        result = runner.invoke(main, [str(person_files["yaml"]), "--to", "JSON"])
        assert result.exit_code == 0
        assert '"isStudent": false' in result.output

    def test_query(self, runner, person_files):
        """Test --query narrows the output."""
        result = runner.invoke(main, [str(person_files["json"]), "--to", "json", "--query", "courses[0]"])
        assert result.exit_code == 0
        assert '"Math"' in result.output
        assert "Alice" not in result.output

    def test_minify(self, runner, person_files, tmp_path):
        """Test --minify output."""
        target = tmp_path / "out.json"
        result = runner.invoke(
            main, [str(person_files["yaml"]), "--to", "json", "--minify", "-o", str(target)]
        )
        assert result.exit_code == 0
        assert "\n" not in target.read_text(encoding="utf-8")

    def test_xml_root(self, runner, person_files, tmp_path):
        """Test --xml-root names the root element."""
        target = tmp_path / "out.xml"
        result = runner.invoke(
            main,
            [str(person_files["json"]), "--to", "xml", "--xml-root", "person", "-o", str(target)],
        )
        assert result.exit_code == 0
        assert "<person>" in target.read_text(encoding="utf-8")

    def test_verify(self, runner, tmp_path):
        """Test --verify rejects output the reference parser refuses."""
        path = tmp_path / "nulls.json"
        path.write_text('{"a": null}', encoding="utf-8")
        result = runner.invoke(main, [str(path), "--to", "toml", "--verify"])
        assert result.exit_code == 1
        assert "not valid TOML" in result.output


class TestErrors:
    """Test failing invocations."""

    def test_missing_target(self, runner, person_files):
        """Test --to is required for conversion."""
        result = runner.invoke(main, [str(person_files["json"])])
        assert result.exit_code == 2
        assert "--to" in result.output

    def test_missing_file(self, runner, tmp_path):
        """Test a missing input file is a usage error."""
        result = runner.invoke(main, [str(tmp_path / "missing.json"), "--to", "yaml"])
        assert result.exit_code == 2

    def test_conversion_error(self, runner, tmp_path):
        """Test conversion failures exit with code 1."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        result = runner.invoke(main, [str(path), "--to", "toml"])
        assert result.exit_code == 1
        assert "Failed to convert to toml" in result.output

    def test_empty_input(self, runner):
        """Test empty stdin is reported."""
        result = runner.invoke(main, ["-", "--to", "json"], input="")
        assert result.exit_code == 1
        assert "No input data" in result.output

    def test_unsupported_choice(self, runner, person_files):
        """Test unknown target formats are rejected by the parser."""
        result = runner.invoke(main, [str(person_files["json"]), "--to", "csv"])
        assert result.exit_code == 2
