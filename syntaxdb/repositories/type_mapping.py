"""Repository for the ``typeMappings`` partition."""

from typing import Optional

from syntaxdb.store.models import TypeMapping
from syntaxdb.store.schema import TYPE_MAPPINGS

from .base import BaseRepository

__all__ = ["TypeMappingRepository"]


class TypeMappingRepository(BaseRepository[TypeMapping]):
    partition = TYPE_MAPPINGS
    record_type = TypeMapping

    async def get_by_type_and_language(
        self,
        abstract_type_id: int,
        language_id: int,
    ) -> Optional[TypeMapping]:
        return await self._find_one("typeLanguage", abstract_type_id, language_id)

    async def get_by_language(self, language_id: int) -> list[TypeMapping]:
        return await self._find_many("languageId", language_id)
