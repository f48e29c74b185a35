"""
Target-language artifact generators.

Only ReScript is implemented.
"""

from .rescript import ClientGenerator, SchemaGenerator, TypesGenerator

__all__ = ["ClientGenerator", "SchemaGenerator", "TypesGenerator"]
