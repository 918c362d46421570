"""
DatabaseSnapshot — the export/import document.

The JSON form is an object with five arrays::

    {
      "languages":    [...],
      "functions":    [...],
      "patterns":     [...],
      "types":        [...],
      "typeMappings": [...]
    }

Each element is a record in its camelCase persisted form plus its ``id``.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from syntaxdb.exceptions import InvalidArgumentError
from syntaxdb.store.models import (
    FunctionDefinition,
    Language,
    SyntaxPattern,
    TypeDefinition,
    TypeMapping,
)

__all__ = ["DatabaseSnapshot"]


def _with_id(record) -> dict:
    return {"id": record.id, **record.to_dict()}


@dataclass
class DatabaseSnapshot:
    languages:     list[Language]            = field(default_factory=list)
    functions:     list[FunctionDefinition]  = field(default_factory=list)
    patterns:      list[SyntaxPattern]       = field(default_factory=list)
    types:         list[TypeDefinition]      = field(default_factory=list)
    type_mappings: list[TypeMapping]         = field(default_factory=list)

    def record_count(self) -> int:
        return (
            len(self.languages) + len(self.functions) + len(self.patterns)
            + len(self.types) + len(self.type_mappings)
        )

    def to_dict(self) -> dict:
        return {
            "languages":    [_with_id(r) for r in self.languages],
            "functions":    [_with_id(r) for r in self.functions],
            "patterns":     [_with_id(r) for r in self.patterns],
            "types":        [_with_id(r) for r in self.types],
            "typeMappings": [_with_id(r) for r in self.type_mappings],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "DatabaseSnapshot":
        """
        Build a snapshot from its document form.  Missing arrays read as empty.

        Raises:
            InvalidArgumentError: *d* is not an object, or a record lacks a required field.
        """
        if not isinstance(d, dict):
            raise InvalidArgumentError(
                f"Snapshot must be a JSON object, got {type(d).__name__}"
            )
        try:
            return cls(
                languages=[Language.from_dict(r) for r in d.get("languages") or []],
                functions=[FunctionDefinition.from_dict(r) for r in d.get("functions") or []],
                patterns=[SyntaxPattern.from_dict(r) for r in d.get("patterns") or []],
                types=[TypeDefinition.from_dict(r) for r in d.get("types") or []],
                type_mappings=[TypeMapping.from_dict(r) for r in d.get("typeMappings") or []],
            )
        except (KeyError, TypeError) as exc:
            raise InvalidArgumentError(f"Malformed snapshot record: {exc}") from exc

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "DatabaseSnapshot":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidArgumentError(f"Snapshot is not valid JSON: {exc}") from exc
        return cls.from_dict(data)

    def write(self, path: Union[str, Path]) -> Path:
        """Write the JSON document to *path*, creating parent directories."""
        out = Path(path).expanduser()
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(self.to_json(), encoding="utf-8")
        return out

    @classmethod
    def read(cls, path: Union[str, Path]) -> "DatabaseSnapshot":
        return cls.from_json(Path(path).expanduser().read_text(encoding="utf-8"))
