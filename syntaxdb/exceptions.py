"""
Project-wide custom exception hierarchy.
All modules raise subclasses of SyntaxDBError — never bare Exception.
"""

__all__ = [
    "SyntaxDBError",
    "StoreError",
    "StoreOpenError",
    "OperationError",
    "DuplicateKeyError",
    "InvalidArgumentError",
    "SeedError",
    "UnsupportedLanguageError",
]


class SyntaxDBError(Exception):
    """Root exception for all syntaxdb errors."""


# ── Store ─────────────────────────────────────────────────────────────────────

class StoreError(SyntaxDBError):
    """Raised on SQLite / store I/O errors."""


class StoreOpenError(StoreError):
    """Raised when the database file cannot be opened or has an unknown schema version."""


class OperationError(StoreError):
    """
    Raised when a repository operation fails inside the store.
    The message names the operation, the partition and the key involved.
    """

    def __init__(self, message: str, operation: str = "", key: object = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.key = key


class DuplicateKeyError(OperationError):
    """Raised when a create/update violates a unique index (name or composite key)."""


# ── Arguments ─────────────────────────────────────────────────────────────────

class InvalidArgumentError(SyntaxDBError, ValueError):
    """Raised before any storage access when the caller passes an unusable record."""


# ── Seeding ───────────────────────────────────────────────────────────────────

class SeedError(SyntaxDBError):
    """Base class for seed fixture errors."""


class UnsupportedLanguageError(SeedError):
    """Raised when no SeedFixtureProvider is registered for the requested language."""
