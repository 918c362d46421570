"""Abstract base class for seed fixture providers."""

from abc import ABC, abstractmethod

from syntaxdb.exceptions import UnsupportedLanguageError
from syntaxdb.store.models import (
    FunctionDefinition,
    Language,
    SyntaxPattern,
    TypeDefinition,
    TypeMapping,
)

__all__ = ["SeedFixtureProvider", "get_provider", "available_providers"]


class SeedFixtureProvider(ABC):
    """
    Supplies the records used to populate an empty store for one source
    language.  Every record is returned without an id; the ones that
    reference other records receive the ids assigned during seeding.

    The factory function get_provider() selects an implementation by
    language name.
    """

    #: Name of the language this provider seeds, e.g. "Python".
    language_name: str = ""

    @abstractmethod
    def extract_language_definition(self) -> Language:
        """The language record itself."""
        ...

    @abstractmethod
    def extract_type_definitions(self) -> list[TypeDefinition]:
        """Abstract types the language's functions refer to."""
        ...

    @abstractmethod
    def generate_type_mappings(
        self,
        type_ids: dict[str, int],
        language_id: int,
    ) -> list[TypeMapping]:
        """
        Concrete type for each abstract type.

        Args:
            type_ids:    Abstract type name → id assigned when it was created.
            language_id: Id assigned to the seeded language.
        """
        ...

    @abstractmethod
    def extract_built_in_functions(self) -> list[FunctionDefinition]:
        ...

    @abstractmethod
    def generate_syntax_patterns(
        self,
        function_ids: dict[str, int],
        language_id: int,
    ) -> list[SyntaxPattern]:
        """
        One code pattern per seeded function.

        Args:
            function_ids: Function name → id assigned when it was created.
            language_id:  Id assigned to the seeded language.
        """
        ...


def _registry() -> dict[str, type[SeedFixtureProvider]]:
    # Deferred import avoids a cycle between base and the implementations.
    from .python_fixture import PythonSeedProvider

    return {PythonSeedProvider.language_name.lower(): PythonSeedProvider}


def available_providers() -> list[str]:
    """Language names that have a registered provider."""
    return [cls.language_name for cls in _registry().values()]


def get_provider(language_name: str = "Python") -> SeedFixtureProvider:
    """
    Factory: return the provider for *language_name* (case-insensitive).

    Raises:
        UnsupportedLanguageError: No provider is registered for the language.
    """
    provider_cls = _registry().get(language_name.lower())
    if provider_cls is None:
        raise UnsupportedLanguageError(
            f"No seed fixture available for language: {language_name}"
        )
    return provider_cls()
