"""
store — SQLite-backed persistence layer for the syntax catalogue.

Public API
──────────
SyntaxStore        — owns the database file, schema and connections
Partition          — descriptor of one partition (table + indices)
Language, FunctionDefinition, SyntaxPattern, TypeDefinition, TypeMapping
                   — record dataclasses
"""

from syntaxdb.store.db import SyntaxStore
from syntaxdb.store.models import (
    FunctionCategory,
    FunctionDefinition,
    Language,
    Parameter,
    PatternType,
    SyntaxPattern,
    SyntaxRules,
    TypeDefinition,
    TypeMapping,
    TypeProperty,
)
from syntaxdb.store.schema import DB_NAME, PARTITIONS, SCHEMA_VERSION, Partition

__all__ = [
    "SyntaxStore",
    "Partition",
    "PARTITIONS",
    "DB_NAME",
    "SCHEMA_VERSION",
    "FunctionCategory",
    "FunctionDefinition",
    "Language",
    "Parameter",
    "PatternType",
    "SyntaxPattern",
    "SyntaxRules",
    "TypeDefinition",
    "TypeMapping",
    "TypeProperty",
]
