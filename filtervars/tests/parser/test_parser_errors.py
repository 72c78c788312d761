# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path

from filtervars.core.diagnostics import has_errors
from filtervars.parser import load_var_file, parse_var_file


def _errors(src: str):
	var_file, diagnostics = parse_var_file(src, "bad.tfvars")
	assert var_file is None
	assert has_errors(diagnostics)
	return diagnostics


def test_unterminated_string_reports_invalid_character() -> None:
	diagnostics = _errors('ok = 1\nfoo = "abc\n')
	assert diagnostics[0].summary == "Invalid character"
	assert diagnostics[0].span.file == "bad.tfvars"
	assert diagnostics[0].span.line == 2


def test_unclosed_bracket_reports_end_of_input() -> None:
	diagnostics = _errors("zones = [\n  \"a\",\n")
	assert diagnostics[0].summary == "Unexpected end of input"


def test_missing_equals_reports_syntax_error() -> None:
	diagnostics = _errors("foo\n")
	assert diagnostics[0].summary == "Invalid syntax"
	assert diagnostics[0].span.line == 1


def test_stray_closing_brace() -> None:
	diagnostics = _errors("a = 1\n}\n")
	assert diagnostics[0].summary == "Invalid syntax"
	assert diagnostics[0].span.line == 2


def test_missing_expression() -> None:
	diagnostics = _errors("a =\nb = 2\n")
	assert diagnostics[0].summary == "Invalid syntax"
	assert diagnostics[0].span.line == 1


def test_json_var_file_is_rejected_without_reading(tmp_path: Path) -> None:
	missing = tmp_path / "does-not-exist.tfvars.json"
	var_file, diagnostics = load_var_file(missing)
	assert var_file is None
	assert len(diagnostics) == 1
	assert diagnostics[0].summary == "JSON tfvars not supported"
	assert str(missing) in diagnostics[0].detail


def test_unreadable_file_reports_read_error(tmp_path: Path) -> None:
	missing = tmp_path / "nope.tfvars"
	var_file, diagnostics = load_var_file(missing)
	assert var_file is None
	assert diagnostics[0].summary == "Failed to read input file"
	assert str(missing) in diagnostics[0].detail


def test_load_var_file_parses_from_disk(tmp_path: Path) -> None:
	path = tmp_path / "ok.tfvars"
	path.write_text('a = "x"\n')
	var_file, diagnostics = load_var_file(path)
	assert diagnostics == []
	assert var_file.filename == str(path)
	assert var_file.attributes["a"].tokens.render() == 'a = "x"\n'


def test_unclosed_template_sequence_is_an_error() -> None:
	diagnostics = _errors('a = "${jsonencode({x = 1})"\n')
	assert diagnostics[0].summary == "Invalid character"
	assert "closing quote" in diagnostics[0].detail
