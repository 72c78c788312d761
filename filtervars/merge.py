# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Merge engine: pick the winning definition of each declared variable.

Variable definitions files are folded in the order they were given, the same
order Terraform applies repeated `-var-file` arguments, so the last file that
defines a name wins. Names the module does not declare are dropped without
comment; dropping them is the whole point of the tool.
"""

from __future__ import annotations

from functools import reduce
from types import MappingProxyType
from typing import AbstractSet, Dict, Iterable, Mapping

from filtervars.parser.ast import RawAttribute, VarFile

MergeState = Mapping[str, RawAttribute]


def _apply(declared: AbstractSet[str], acc: Dict[str, RawAttribute], attr: RawAttribute) -> Dict[str, RawAttribute]:
	if attr.name not in declared:
		return acc
	return {**acc, attr.name: attr}


def merge_attributes(declared: AbstractSet[str], var_files: Iterable[VarFile]) -> MergeState:
	"""
	Fold every attribute of every file, in order, into a name -> attribute map.

	The returned mapping is read-only.
	"""
	pairs = (attr for var_file in var_files for attr in var_file)
	merged = reduce(lambda acc, attr: _apply(declared, acc, attr), pairs, {})
	return MappingProxyType(merged)


__all__ = ["MergeState", "merge_attributes"]
