# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lightweight source span representation used by diagnostics.

A Span carries the best-effort file/line/column of whatever produced a
diagnostic. Lark tokens and lark exceptions can both be turned into a Span
via `from_loc`; the original object is kept in `raw` for richer renderers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column plus raw parser loc)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from a lark Token, a lark UnexpectedInput, or any
		object exposing `line`/`column` attributes.

		If `loc` is already a Span it is returned unchanged (with `file` filled
		in when the span had none).
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			if loc.file is None and file is not None:
				return cls(
					file=file,
					line=loc.line,
					column=loc.column,
					end_line=loc.end_line,
					end_column=loc.end_column,
					raw=loc.raw,
				)
			return loc
		line = getattr(loc, "line", None)
		column = getattr(loc, "column", None)
		# lark uses -1 when the position is unknown (e.g. UnexpectedEOF).
		if isinstance(line, int) and line < 1:
			line = None
		if isinstance(column, int) and column < 1:
			column = None
		return cls(
			file=file or getattr(loc, "file", None) or getattr(loc, "filename", None) or None,
			line=line,
			column=column,
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
			raw=loc,
		)

	def is_known(self) -> bool:
		return self.file is not None or self.line is not None

	def format_location(self) -> str:
		"""Render as `file:line` (or just `file`), empty when nothing is known."""
		if self.file is None:
			return "" if self.line is None else f"?:{self.line}"
		if self.line is None:
			return self.file
		return f"{self.file}:{self.line}"


__all__ = ["Span"]
