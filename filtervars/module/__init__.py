"""
Terraform module introspection: which input variables does a module declare?
"""

from .discover import discover_module_variables, module_files

__all__ = ["discover_module_variables", "module_files"]
