"""
Code generation — C++17 программы, воспроизводящие вычисления каталога.
"""

from src.codegen.generator import (
    ROUNDING_DIRECTIVES,
    CapturedOperands,
    CodeGenerator,
    GeneratedSource,
    GeneratorConfig,
)
from src.codegen.helpers import HELPERS, CppHelper, resolve_helpers

__all__ = [
    # Generator
    "CodeGenerator",
    "GeneratorConfig",
    "CapturedOperands",
    "GeneratedSource",
    "ROUNDING_DIRECTIVES",
    # Helpers
    "CppHelper",
    "HELPERS",
    "resolve_helpers",
]
