"""Repository for the ``syntaxPatterns`` partition."""

from typing import Optional

from syntaxdb.store.models import SyntaxPattern
from syntaxdb.store.schema import SYNTAX_PATTERNS

from .base import BaseRepository

__all__ = ["SyntaxPatternRepository"]


class SyntaxPatternRepository(BaseRepository[SyntaxPattern]):
    partition = SYNTAX_PATTERNS
    record_type = SyntaxPattern

    async def get_by_function_and_language(
        self,
        function_id: int,
        language_id: int,
    ) -> Optional[SyntaxPattern]:
        """The pattern for one function in one language; at most one exists."""
        return await self._find_one("functionLanguage", function_id, language_id)

    async def get_by_language(self, language_id: int) -> list[SyntaxPattern]:
        return await self._find_many("languageId", language_id)
