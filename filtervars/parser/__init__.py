"""
Variable definitions file parser.

Turns `.tfvars` files into `VarFile` bodies whose attributes keep their
original source text, and reports read/format/syntax problems as
diagnostics instead of raising.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from filtervars.core.diagnostics import Diagnostic

from .ast import RawAttribute, TokenSpan, VarFile
from .parser import parse_var_file


def is_json_var_file(path: str | Path) -> bool:
	return str(path).endswith(".json")


def load_var_file(path: str | Path) -> Tuple[Optional[VarFile], List[Diagnostic]]:
	"""
	Read and parse one variable definitions file from disk.

	JSON files are rejected without being opened: the output is a single
	native syntax file and JSON expressions cannot be pasted into it as-is.
	"""
	name = str(path)
	if is_json_var_file(name):
		return None, [
			Diagnostic.error(
				"JSON tfvars not supported",
				f"Can't read {name}: only native syntax .tfvars files are supported.",
			)
		]
	try:
		source = Path(path).read_text(encoding="utf-8")
	except (OSError, UnicodeDecodeError) as err:
		return None, [
			Diagnostic.error(
				"Failed to read input file",
				f"Can't read {name}: {_describe_os_error(err)}.",
			)
		]
	return parse_var_file(source, name)


def _describe_os_error(err: Exception) -> str:
	if isinstance(err, OSError) and err.strerror:
		return err.strerror.lower()
	return str(err)


__all__ = [
	"RawAttribute",
	"TokenSpan",
	"VarFile",
	"is_json_var_file",
	"load_var_file",
	"parse_var_file",
]
