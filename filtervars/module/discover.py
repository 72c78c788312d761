# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Module variable discovery.

Finds the names of the input variables a Terraform module declares by
reading every `*.tf` file (via python-hcl2) and every `*.tf.json` file in the
module directory and collecting the labels of its `variable` blocks. Only
the names matter; types, defaults and validations are ignored.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, Tuple

import hcl2
from lark.exceptions import LarkError, UnexpectedInput, VisitError

from filtervars.core.diagnostics import Diagnostic
from filtervars.core.span import Span

NATIVE_SUFFIX = ".tf"
JSON_SUFFIX = ".tf.json"


def discover_module_variables(module_dir: str | Path) -> Tuple[frozenset[str], List[Diagnostic]]:
	"""
	Return the declared variable names of the module in `module_dir`.

	Problems are reported as diagnostics; a module that cannot be read at all
	yields an empty set alongside an error.
	"""
	root = Path(module_dir)
	diagnostics: List[Diagnostic] = []
	if not root.is_dir():
		diagnostics.append(
			Diagnostic.error(
				"Failed to read module directory",
				f"Module directory {module_dir} does not exist or cannot be read.",
			)
		)
		return frozenset(), diagnostics

	try:
		paths = module_files(root)
	except OSError as err:
		diagnostics.append(
			Diagnostic.error(
				"Failed to read module directory",
				f"Module directory {module_dir} does not exist or cannot be read: {err}.",
			)
		)
		return frozenset(), diagnostics

	if not paths:
		diagnostics.append(
			Diagnostic.warning(
				"No configuration files",
				f"Module directory {module_dir} contains no .tf or .tf.json files, so it declares no variables.",
			)
		)

	names: set[str] = set()
	for path in paths:
		try:
			source = path.read_text(encoding="utf-8")
		except (OSError, UnicodeDecodeError) as err:
			diagnostics.append(
				Diagnostic.error(
					"Failed to read file",
					f"The configuration file {path} could not be read: {err}.",
				)
			)
			continue
		if path.name.endswith(JSON_SUFFIX):
			names.update(_json_variable_names(path, source, diagnostics))
		else:
			names.update(_native_variable_names(path, source, diagnostics))
	return frozenset(names), diagnostics


def module_files(root: Path) -> List[Path]:
	"""Configuration files of a module, in name order, skipping editor/hidden files."""
	paths: List[Path] = []
	for path in sorted(root.iterdir()):
		name = path.name
		if name.startswith((".", "#")) or name.endswith("~"):
			continue
		if not (name.endswith(NATIVE_SUFFIX) or name.endswith(JSON_SUFFIX)):
			continue
		if path.is_file():
			paths.append(path)
	return paths


def _native_variable_names(path: Path, source: str, diagnostics: List[Diagnostic]) -> Iterable[str]:
	try:
		data = hcl2.loads(source)
	except UnexpectedInput as err:
		diagnostics.append(
			Diagnostic.error(
				"Invalid module file",
				f"Failed to parse {path}: {_first_line(err)}",
				Span.from_loc(err, file=str(path)),
			)
		)
		return []
	except VisitError as err:
		diagnostics.append(
			Diagnostic.error("Invalid module file", f"Failed to parse {path}: {err.orig_exc}")
		)
		return []
	except (LarkError, ValueError) as err:
		diagnostics.append(Diagnostic.error("Invalid module file", f"Failed to parse {path}: {err}"))
		return []
	return _variable_labels(data.get("variable", []))


def _json_variable_names(path: Path, source: str, diagnostics: List[Diagnostic]) -> Iterable[str]:
	try:
		data = json.loads(source)
	except json.JSONDecodeError as err:
		diagnostics.append(
			Diagnostic.error(
				"Invalid module file",
				f"Failed to parse {path}: {err.msg}",
				Span(file=str(path), line=err.lineno, column=err.colno),
			)
		)
		return []
	if not isinstance(data, dict):
		diagnostics.append(
			Diagnostic.error("Invalid module file", f"The root of {path} must be a JSON object.")
		)
		return []
	return _variable_labels(data.get("variable", []))


def _variable_labels(blocks: Any) -> List[str]:
	"""
	Collect variable names from a decoded `variable` entry.

	python-hcl2 yields a list of single-key dicts (one per block); JSON
	configuration uses one object keyed by name, or a list of such objects.
	"""
	if isinstance(blocks, dict):
		blocks = [blocks]
	if not isinstance(blocks, list):
		return []
	names: List[str] = []
	for block in blocks:
		if not isinstance(block, dict):
			continue
		for label in block:
			if label.startswith("__"):
				# python-hcl2 metadata keys (__start_line__ etc.)
				continue
			names.append(_unquote(label))
	return names


def _unquote(label: str) -> str:
	# Newer python-hcl2 releases keep the quotes around block labels.
	if len(label) >= 2 and label[0] == label[-1] == '"':
		return label[1:-1]
	return label


def _first_line(err: Exception) -> str:
	text = str(err).strip()
	return text.splitlines()[0] if text else type(err).__name__


__all__ = ["discover_module_variables", "module_files"]
