"""
ReScript code generator module.

Generates type declarations, rescript-schema validators and a fetch
client from the lowered IR.
"""

from .client_generator import ClientGenerator
from .schema_generator import SchemaGenerator
from .types import RescriptTypeMapper
from .types_generator import TypesGenerator

__all__ = [
    "ClientGenerator",
    "RescriptTypeMapper",
    "SchemaGenerator",
    "TypesGenerator",
]
