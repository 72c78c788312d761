# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
terraform-filter-vars driver.

Pipeline:

module dir -> declared variable names (module.discover)
var files  -> parsed bodies, one per file, in argument order (parser)
           -> last-wins merge restricted to declared names (merge)
           -> sorted verbatim output (emit)
           -> stdout or a file written all-or-nothing

Diagnostics from every stage are collected and checked at two checkpoints
(after discovery, after all files are parsed); output problems end the run
immediately. Any error means exit status 1.
"""

from __future__ import annotations

import argparse
import json
import os
import shutil
import sys
from pathlib import Path
from typing import List, Sequence

from filtervars.buildinfo import DEFAULT_BUILD, BuildInfo
from filtervars.core.diagnostics import Diagnostic, has_errors
from filtervars.emit import emit_bytes
from filtervars.merge import merge_attributes
from filtervars.module import discover_module_variables
from filtervars.parser import VarFile, load_var_file

PROG = "terraform-filter-vars"

USAGE = (
	f"Usage: {PROG} [options] <module-dir> [tfvars-files...]\n"
	"\n"
	"Reads the given tfvars files and produces output in tfvars format containing only\n"
	"definitions for variables declared in the given module.\n"
	"\n"
	"Options:\n"
	"  -o, --out PATH   output to a given file, instead of stdout (default: -)\n"
	"  --json           emit diagnostics as JSON on stderr\n"
	"  -v, --version    show version information\n"
)


class _UsageError(Exception):
	pass


class _ArgumentParser(argparse.ArgumentParser):
	def error(self, message: str) -> None:  # type: ignore[override]
		raise _UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
	p = _ArgumentParser(prog=PROG, add_help=False)
	p.add_argument("-v", "--version", action="store_true", help="show version information")
	p.add_argument("-o", "--out", default="-", help="output to a given file, instead of stdout")
	p.add_argument("--json", action="store_true", help="Emit diagnostics as JSON (severity/summary/detail/file/line/column)")
	p.add_argument("-h", "--help", action="store_true", help="show usage")
	p.add_argument("module_dir", nargs="?", help="Terraform module directory")
	p.add_argument("var_files", nargs="*", help="Variable definitions files, later files win")
	return p


def _usage(message: str | None = None) -> None:
	if message:
		print(f"{PROG}: {message}", file=sys.stderr)
	print(USAGE, file=sys.stderr)


def main(argv: list[str] | None = None, build: BuildInfo = DEFAULT_BUILD) -> int:
	"""
	Parse arguments and run the filter. Returns the process exit status.

	`build` carries the version metadata reported by `--version`.
	"""
	parser = _build_parser()
	try:
		args = parser.parse_intermixed_args(argv)
	except _UsageError as err:
		_usage(str(err))
		return 1

	if args.version:
		print(f"{PROG} {build.version_string()}")
		return 0
	if args.help:
		print(USAGE)
		return 0
	if args.module_dir is None:
		_usage()
		return 1

	return run(args.module_dir, list(args.var_files), out=args.out, json_output=args.json)


def run(module_dir: str, var_files: Sequence[str], *, out: str = "-", json_output: bool = False) -> int:
	"""Run the whole pipeline, report diagnostics on stderr and return the exit status."""
	diagnostics: List[Diagnostic] = []

	declared, discover_diags = discover_module_variables(module_dir)
	diagnostics.extend(discover_diags)
	if has_errors(diagnostics):
		return _finish(diagnostics, json_output)

	# Every file is read even after a failure so all problems are reported
	# together; failed files contribute nothing to the merge.
	parsed: List[VarFile] = []
	for path in var_files:
		var_file, file_diags = load_var_file(path)
		diagnostics.extend(file_diags)
		if var_file is None or has_errors(file_diags):
			continue
		parsed.append(var_file)
	if has_errors(diagnostics):
		return _finish(diagnostics, json_output)

	state = merge_attributes(declared, parsed)
	payload = emit_bytes(state, declared)

	diagnostics.extend(write_output(payload, out))
	return _finish(diagnostics, json_output)


def write_output(payload: bytes, out: str) -> List[Diagnostic]:
	"""
	Write the rendered document to stdout (`-`) or to a file.

	Regular files are written to a temporary sibling and moved into place,
	so the target is either fully replaced or left untouched. Symlinks are
	followed and an existing file keeps its permission bits. Anything that
	exists but is not a regular file (a device, a FIFO) is written directly.
	"""
	if out == "-":
		try:
			_write_stdout(payload)
		except OSError as err:
			return [Diagnostic.error("Failed to write to output file", f"Error writing to {out}: {_strerror(err)}.")]
		return []

	target = Path(os.path.realpath(out))
	if target.exists() and not target.is_file():
		return _write_direct(payload, target, out)

	tmp = target.with_name(target.name + f".tmp.{os.getpid()}")
	try:
		fh = open(tmp, "wb")
	except OSError as err:
		return [Diagnostic.error("Failed to open output file", f"Can't create {out}: {_strerror(err)}.")]
	try:
		with fh:
			fh.write(payload)
		if target.exists():
			shutil.copymode(target, tmp)
		os.replace(tmp, target)
	except OSError as err:
		tmp.unlink(missing_ok=True)
		return [Diagnostic.error("Failed to write to output file", f"Error writing to {out}: {_strerror(err)}.")]
	return []


def _write_direct(payload: bytes, target: Path, out: str) -> List[Diagnostic]:
	try:
		fh = open(target, "wb")
	except OSError as err:
		return [Diagnostic.error("Failed to open output file", f"Can't create {out}: {_strerror(err)}.")]
	try:
		with fh:
			fh.write(payload)
	except OSError as err:
		return [Diagnostic.error("Failed to write to output file", f"Error writing to {out}: {_strerror(err)}.")]
	return []


def _write_stdout(payload: bytes) -> None:
	stream = getattr(sys.stdout, "buffer", None)
	if stream is None:
		sys.stdout.write(payload.decode("utf-8"))
		sys.stdout.flush()
		return
	sys.stdout.flush()
	stream.write(payload)
	stream.flush()


def _strerror(err: OSError) -> str:
	return (err.strerror or str(err)).lower()


def _finish(diagnostics: List[Diagnostic], json_output: bool) -> int:
	exit_code = 1 if has_errors(diagnostics) else 0
	if json_output:
		payload = {
			"exit_code": exit_code,
			"diagnostics": [d.to_dict() for d in diagnostics],
		}
		print(json.dumps(payload), file=sys.stderr)
	else:
		for d in diagnostics:
			print(d.format_human(), file=sys.stderr)
	return exit_code


__all__ = ["PROG", "main", "run", "write_output"]
