# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Output emitter: paste the winning attributes back out, sorted by name.

Each attribute is written exactly as it was captured, comments included.
Nothing else is written, so the result can be fed straight to Terraform.
"""

from __future__ import annotations

from typing import Iterable

from filtervars.merge import MergeState


def emit_document(state: MergeState, declared: Iterable[str]) -> str:
	parts = []
	for name in sorted(declared):
		attr = state.get(name)
		if attr is None:
			continue
		parts.append(attr.tokens.render())
	return "".join(parts)


def emit_bytes(state: MergeState, declared: Iterable[str]) -> bytes:
	return emit_document(state, declared).encode("utf-8")


__all__ = ["emit_bytes", "emit_document"]
