"""
repositories — typed CRUD access, one repository per partition.

Public API
──────────
LanguageRepository        — languages, by name / enabled
FunctionRepository        — functions, by name / category / built-in / search
SyntaxPatternRepository   — patterns, by (function, language) / language
TypeRepository            — abstract types, by name
TypeMappingRepository     — type mappings, by (type, language) / language
Repositories              — the five bundled together, optionally bound
                            to one shared connection
"""

from dataclasses import dataclass

import aiosqlite

from syntaxdb.store.db import SyntaxStore

from .base import BaseRepository
from .function import FunctionRepository
from .language import LanguageRepository
from .pattern import SyntaxPatternRepository
from .type_definition import TypeRepository
from .type_mapping import TypeMappingRepository

__all__ = [
    "BaseRepository",
    "FunctionRepository",
    "LanguageRepository",
    "Repositories",
    "SyntaxPatternRepository",
    "TypeMappingRepository",
    "TypeRepository",
]


@dataclass
class Repositories:
    languages:     LanguageRepository
    functions:     FunctionRepository
    patterns:      SyntaxPatternRepository
    types:         TypeRepository
    type_mappings: TypeMappingRepository

    @classmethod
    def for_store(cls, store: SyntaxStore) -> "Repositories":
        return cls(
            languages=LanguageRepository(store),
            functions=FunctionRepository(store),
            patterns=SyntaxPatternRepository(store),
            types=TypeRepository(store),
            type_mappings=TypeMappingRepository(store),
        )

    def bind(self, connection: aiosqlite.Connection) -> "Repositories":
        """All five repositories working inside *connection*'s transaction."""
        return Repositories(
            languages=self.languages.bind(connection),
            functions=self.functions.bind(connection),
            patterns=self.patterns.bind(connection),
            types=self.types.bind(connection),
            type_mappings=self.type_mappings.bind(connection),
        )
