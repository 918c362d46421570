"""
syntaxdb — local catalogue of programming-language syntax metadata.

Public API
──────────
SyntaxDatabaseService — lazy-initializing facade (CRUD, search, export/import)
SyntaxStore           — SQLite file, schema and transactions
DatabaseInitializer   — seed-if-empty, clear, reset
DatabaseSnapshot      — export/import document
StoreConfig           — store settings
"""

from syntaxdb.config import StoreConfig
from syntaxdb.initializer import DatabaseInitializer
from syntaxdb.service import InitializationState, SyntaxDatabaseService
from syntaxdb.snapshot import DatabaseSnapshot
from syntaxdb.store import (
    FunctionCategory,
    FunctionDefinition,
    Language,
    Parameter,
    PatternType,
    SyntaxPattern,
    SyntaxRules,
    SyntaxStore,
    TypeDefinition,
    TypeMapping,
    TypeProperty,
)

__version__ = "1.0.0"

__all__ = [
    "DatabaseInitializer",
    "DatabaseSnapshot",
    "FunctionCategory",
    "FunctionDefinition",
    "InitializationState",
    "Language",
    "Parameter",
    "PatternType",
    "StoreConfig",
    "SyntaxDatabaseService",
    "SyntaxPattern",
    "SyntaxRules",
    "SyntaxStore",
    "TypeDefinition",
    "TypeMapping",
    "TypeProperty",
]
