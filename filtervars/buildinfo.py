# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Build metadata shown by `--version`.

Release builds construct their own `BuildInfo` (with the real commit and an
empty prerelease) and pass it to `filtervars.filtervars.main`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from filtervars import __version__


@dataclass(frozen=True)
class BuildInfo:
	version: str = f"v{__version__}"
	prerelease: str = "dev"
	git_commit: Optional[str] = None

	def version_string(self) -> str:
		text = self.version
		if self.prerelease:
			text = f"{text}-{self.prerelease}"
		if self.git_commit:
			text = f"{text} ({self.git_commit})"
		return text


DEFAULT_BUILD = BuildInfo()

__all__ = ["BuildInfo", "DEFAULT_BUILD"]
