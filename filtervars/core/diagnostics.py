# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure shared by every stage of the filter pipeline.

Module discovery, var-file parsing and output writing all report problems
as `Diagnostic` values appended to a plain list. The driver inspects that
list at its checkpoints; nothing is raised across stage boundaries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from .span import Span


class Severity(Enum):
	ERROR = "error"
	WARNING = "warning"

	@property
	def label(self) -> str:
		return "Error" if self is Severity.ERROR else "Warning"


@dataclass(frozen=True)
class Diagnostic:
	"""Represents a single error or warning produced while filtering."""

	severity: Severity
	summary: str
	detail: str = ""
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).

	@classmethod
	def error(cls, summary: str, detail: str = "", span: Span | None = None) -> "Diagnostic":
		return cls(severity=Severity.ERROR, summary=summary, detail=detail, span=span or Span())

	@classmethod
	def warning(cls, summary: str, detail: str = "", span: Span | None = None) -> "Diagnostic":
		return cls(severity=Severity.WARNING, summary=summary, detail=detail, span=span or Span())

	@property
	def is_error(self) -> bool:
		return self.severity is Severity.ERROR

	def format_human(self) -> str:
		"""Render as a single line: `Error: (file:line) summary; detail`."""
		prefix = f"{self.severity.label}: "
		loc = self.span.format_location() if self.span.line is not None else ""
		if loc:
			prefix = f"{prefix}({loc}) "
		if self.detail:
			return f"{prefix}{self.summary}; {self.detail}"
		return f"{prefix}{self.summary}"

	def to_dict(self) -> dict[str, Any]:
		return {
			"severity": self.severity.value,
			"summary": self.summary,
			"detail": self.detail,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
		}


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
	return any(d.is_error for d in diagnostics)


__all__ = ["Diagnostic", "Severity", "has_errors"]
