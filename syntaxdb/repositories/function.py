"""Repository for the ``functions`` partition."""

from typing import Optional, Union

from syntaxdb.store.models import FunctionCategory, FunctionDefinition
from syntaxdb.store.schema import FUNCTIONS

from .base import BaseRepository

__all__ = ["FunctionRepository"]


class FunctionRepository(BaseRepository[FunctionDefinition]):
    partition = FUNCTIONS
    record_type = FunctionDefinition

    async def get_by_name(self, name: str) -> Optional[FunctionDefinition]:
        return await self._find_one("name", name)

    async def get_by_category(
        self,
        category: Union[FunctionCategory, str],
    ) -> list[FunctionDefinition]:
        """
        Functions in *category*.

        Accepts the enum member or its stored string ("Math", "Input/Output" …).
        An unknown string simply matches nothing.
        """
        value = category.value if isinstance(category, FunctionCategory) else category
        return await self._find_many("category", value)

    async def get_built_in(self) -> list[FunctionDefinition]:
        return await self._find_many("isBuiltIn", 1)

    async def search(self, query: str) -> list[FunctionDefinition]:
        """
        Case-insensitive substring search over name, display name,
        description and tags.  A blank query returns every function.
        """
        everything = await self.get_all()
        if not query or not query.strip():
            return everything
        return [fn for fn in everything if fn.matches(query)]
