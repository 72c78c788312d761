# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path

import pytest


def write_file(path: Path, content: str) -> Path:
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(content)
	return path


def variables_tf(*names: str) -> str:
	return "".join(f'variable "{name}" {{\n  type = string\n}}\n\n' for name in names)


@pytest.fixture
def make_module(tmp_path: Path):
	"""Create a module directory declaring the given variable names."""

	def _make(*names: str, dirname: str = "module") -> Path:
		module_dir = tmp_path / dirname
		module_dir.mkdir(parents=True, exist_ok=True)
		write_file(module_dir / "variables.tf", variables_tf(*names))
		return module_dir

	return _make


@pytest.fixture
def make_var_file(tmp_path: Path):
	"""Write a variable definitions file under tmp_path and return its path."""

	def _make(name: str, content: str) -> Path:
		return write_file(tmp_path / name, content)

	return _make
