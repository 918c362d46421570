"""
Schema of the syntax database.

Five partitions (SQLite tables), each with an auto-assigned integer id,
one column per indexed field and a JSON ``data`` column holding the full
record.  The partition list is closed: clear/export iterate PARTITIONS,
never the live sqlite_master catalogue.
"""

from dataclasses import dataclass, field

__all__ = [
    "DB_NAME",
    "SCHEMA_VERSION",
    "IndexSpec",
    "Partition",
    "LANGUAGES",
    "FUNCTIONS",
    "SYNTAX_PATTERNS",
    "TYPES",
    "TYPE_MAPPINGS",
    "PARTITIONS",
    "schema_statements",
]

DB_NAME = "vvs_syntax_db"

# Bump when a partition or index is added.  Upgrades only ever add.
SCHEMA_VERSION = 1


@dataclass(frozen=True)
class IndexSpec:
    """Secondary index over one or more partition columns."""
    name:    str
    columns: tuple[str, ...]
    unique:  bool = False


@dataclass(frozen=True)
class Partition:
    """
    Descriptor for one partition.

    Fields
    ──────
    name     — table name, e.g. "syntaxPatterns"
    columns  — indexed column name → record attribute it is copied from
    indices  — IndexSpec list; unique ones back DuplicateKey detection
    """
    name:    str
    columns: dict[str, str]          = field(default_factory=dict)
    indices: tuple[IndexSpec, ...]   = ()

    def index(self, name: str) -> IndexSpec:
        for idx in self.indices:
            if idx.name == name:
                return idx
        raise KeyError(f"{self.name} has no index named {name!r}")

    def create_statements(self) -> list[str]:
        cols = "".join(f",\n    {col} NOT NULL" for col in self.columns)
        stmts = [
            f"CREATE TABLE IF NOT EXISTS {self.name} (\n"
            f"    id INTEGER PRIMARY KEY AUTOINCREMENT{cols},\n"
            f"    data TEXT NOT NULL\n"
            f")"
        ]
        for idx in self.indices:
            unique = "UNIQUE " if idx.unique else ""
            stmts.append(
                f"CREATE {unique}INDEX IF NOT EXISTS idx_{self.name}_{idx.name} "
                f"ON {self.name} ({', '.join(idx.columns)})"
            )
        return stmts


LANGUAGES = Partition(
    name="languages",
    columns={"name": "name"},
    indices=(IndexSpec("name", ("name",), unique=True),),
)

FUNCTIONS = Partition(
    name="functions",
    columns={"name": "name", "category": "category", "isBuiltIn": "is_builtin"},
    indices=(
        IndexSpec("name", ("name",), unique=True),
        IndexSpec("category", ("category",)),
        IndexSpec("isBuiltIn", ("isBuiltIn",)),
    ),
)

SYNTAX_PATTERNS = Partition(
    name="syntaxPatterns",
    columns={"functionId": "function_id", "languageId": "language_id"},
    indices=(
        IndexSpec("functionLanguage", ("functionId", "languageId"), unique=True),
        IndexSpec("languageId", ("languageId",)),
    ),
)

TYPES = Partition(
    name="types",
    columns={"name": "name"},
    indices=(IndexSpec("name", ("name",), unique=True),),
)

TYPE_MAPPINGS = Partition(
    name="typeMappings",
    columns={"abstractTypeId": "abstract_type_id", "languageId": "language_id"},
    indices=(
        IndexSpec("typeLanguage", ("abstractTypeId", "languageId"), unique=True),
        IndexSpec("languageId", ("languageId",)),
    ),
)

PARTITIONS: tuple[Partition, ...] = (
    LANGUAGES,
    FUNCTIONS,
    SYNTAX_PATTERNS,
    TYPES,
    TYPE_MAPPINGS,
)


def schema_statements() -> list[str]:
    """All CREATE … IF NOT EXISTS statements, safe to run repeatedly."""
    stmts: list[str] = []
    for partition in PARTITIONS:
        stmts.extend(partition.create_statements())
    return stmts
