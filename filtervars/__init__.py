# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
terraform-filter-vars (`filtervars`).

Filters and merges Terraform variable definitions files down to the
variables a module actually declares. The CLI entrypoint is
`filtervars.filtervars:main`.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
