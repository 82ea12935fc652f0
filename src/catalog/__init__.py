"""
Operation catalog — реестр функций, их описания и шаблоны C++.
"""

from src.catalog.builtin import DEFAULT_CATALOG, build_default_catalog
from src.catalog.descriptors import ArgumentRole, FunctionDescriptor, ResultKind
from src.catalog.registry import CatalogEntry, OperationCatalog, UnsupportedOperation
from src.catalog.templates import SourceTemplate, TemplateKind

__all__ = [
    # Descriptors
    "ArgumentRole",
    "ResultKind",
    "FunctionDescriptor",
    # Registry
    "OperationCatalog",
    "CatalogEntry",
    "UnsupportedOperation",
    "DEFAULT_CATALOG",
    "build_default_catalog",
    # Templates
    "SourceTemplate",
    "TemplateKind",
]
