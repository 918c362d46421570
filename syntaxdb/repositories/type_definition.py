"""Repository for the ``types`` partition (abstract types)."""

from typing import Optional

from syntaxdb.store.models import TypeDefinition
from syntaxdb.store.schema import TYPES

from .base import BaseRepository

__all__ = ["TypeRepository"]


class TypeRepository(BaseRepository[TypeDefinition]):
    partition = TYPES
    record_type = TypeDefinition

    async def get_by_name(self, name: str) -> Optional[TypeDefinition]:
        return await self._find_one("name", name)
