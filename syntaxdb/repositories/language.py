"""Repository for the ``languages`` partition."""

from typing import Optional

from syntaxdb.store.models import Language
from syntaxdb.store.schema import LANGUAGES

from .base import BaseRepository

__all__ = ["LanguageRepository"]


class LanguageRepository(BaseRepository[Language]):
    partition = LANGUAGES
    record_type = Language

    async def get_by_name(self, name: str) -> Optional[Language]:
        return await self._find_one("name", name)

    async def get_enabled(self) -> list[Language]:
        """Languages whose ``is_enabled`` flag is set."""
        return [lang for lang in await self.get_all() if lang.is_enabled]
