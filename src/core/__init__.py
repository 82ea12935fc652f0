"""
Core domain models, codecs, mathematical primitives, and contracts.

This module contains the foundational building blocks that are independent
of the catalog and the code generator: value model, bit codec, rounding
engine, libm and special functions, request contracts.
"""
