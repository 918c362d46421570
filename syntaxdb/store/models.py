"""
Data models for the store module.

Every record carries an ``id`` that is None until the owning repository
assigns one.  ``to_dict()`` produces the persisted / exported document
(camelCase keys, no ``id``); ``from_dict()`` reads it back.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from syntaxdb.exceptions import InvalidArgumentError

__all__ = [
    "FunctionCategory",
    "PatternType",
    "SyntaxRules",
    "Language",
    "TypeProperty",
    "TypeDefinition",
    "Parameter",
    "FunctionDefinition",
    "SyntaxPattern",
    "TypeMapping",
]


# ── Enumerations ──────────────────────────────────────────────────────────────

class FunctionCategory(str, Enum):
    MATH         = "Math"
    STRING       = "String"
    ARRAY        = "Array"
    OBJECT       = "Object"
    CONTROL_FLOW = "Control Flow"
    IO           = "Input/Output"
    CONVERSION   = "Conversion"
    DATE_TIME    = "Date & Time"
    UTILITY      = "Utility"
    CUSTOM       = "Custom"


class PatternType(str, Enum):
    """How a generated snippet is placed in the output code."""
    EXPRESSION = "expression"   # yields a value inline
    STATEMENT  = "statement"    # a full line with side effects
    BLOCK      = "block"        # multi-line construct


_PLACEHOLDER_RE = re.compile(r"\{(\d+)\}")


def _coerce(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidArgumentError(
            f"{value!r} is not a valid {enum_cls.__name__}"
        ) from None


# ── Language ──────────────────────────────────────────────────────────────────

@dataclass
class SyntaxRules:
    """Syntax bundle of a language, used when rendering generated code."""
    statement_delimiter:          str            = "\n"
    block_start:                  str            = ""
    block_end:                    str            = ""
    comment_single:               str            = ""
    comment_multi_start:          str            = ""
    comment_multi_end:            str            = ""
    string_delimiters:            list[str]      = field(default_factory=list)
    indentation_style:            str            = "space"   # "space" | "tab"
    indentation_size:             int            = 4
    function_definition_pattern:  str            = ""
    variable_declaration_pattern: str            = ""
    operator_patterns:            dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.indentation_style not in ("space", "tab"):
            raise InvalidArgumentError(
                f"indentation_style must be 'space' or 'tab', got {self.indentation_style!r}"
            )

    def indent(self, level: int = 1) -> str:
        """Return the whitespace for *level* indentation steps."""
        if self.indentation_style == "tab":
            return "\t" * level
        return " " * (self.indentation_size * level)

    def to_dict(self) -> dict:
        return {
            "statementDelimiter":         self.statement_delimiter,
            "blockStart":                 self.block_start,
            "blockEnd":                   self.block_end,
            "commentSingle":              self.comment_single,
            "commentMultiStart":          self.comment_multi_start,
            "commentMultiEnd":            self.comment_multi_end,
            "stringDelimiters":           list(self.string_delimiters),
            "indentationStyle":           self.indentation_style,
            "indentationSize":            self.indentation_size,
            "functionDefinitionPattern":  self.function_definition_pattern,
            "variableDeclarationPattern": self.variable_declaration_pattern,
            "operatorPatterns":           dict(self.operator_patterns),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "SyntaxRules":
        return cls(
            statement_delimiter=d.get("statementDelimiter", "\n"),
            block_start=d.get("blockStart", ""),
            block_end=d.get("blockEnd", ""),
            comment_single=d.get("commentSingle", ""),
            comment_multi_start=d.get("commentMultiStart", ""),
            comment_multi_end=d.get("commentMultiEnd", ""),
            string_delimiters=list(d.get("stringDelimiters", [])),
            indentation_style=d.get("indentationStyle", "space"),
            indentation_size=int(d.get("indentationSize", 4)),
            function_definition_pattern=d.get("functionDefinitionPattern", ""),
            variable_declaration_pattern=d.get("variableDeclarationPattern", ""),
            operator_patterns=dict(d.get("operatorPatterns", {})),
        )


@dataclass
class Language:
    """
    A target programming language.

    Fields
    ──────
    name           — unique display name, e.g. "Python"
    version        — language version, e.g. "3.11"
    file_extension — default source file extension, e.g. ".py"
    syntax_rules   — SyntaxRules bundle
    is_enabled     — whether the language is offered to users
    """
    name:           str
    version:        str
    file_extension: str                 = ""
    syntax_rules:   SyntaxRules         = field(default_factory=SyntaxRules)
    is_enabled:     bool                = True
    description:    Optional[str]       = None
    website:        Optional[str]       = None
    id:             Optional[int]       = None

    def to_dict(self) -> dict:
        d: dict = {
            "name":          self.name,
            "version":       self.version,
            "fileExtension": self.file_extension,
            "syntaxRules":   self.syntax_rules.to_dict(),
            "isEnabled":     self.is_enabled,
        }
        if self.description is not None:
            d["description"] = self.description
        if self.website is not None:
            d["website"] = self.website
        return d

    @classmethod
    def from_dict(cls, d: dict, record_id: Optional[int] = None) -> "Language":
        return cls(
            name=d["name"],
            version=d.get("version", ""),
            file_extension=d.get("fileExtension", ""),
            syntax_rules=SyntaxRules.from_dict(d.get("syntaxRules", {})),
            is_enabled=bool(d.get("isEnabled", True)),
            description=d.get("description"),
            website=d.get("website"),
            id=record_id if record_id is not None else d.get("id"),
        )

    def __str__(self) -> str:
        return f"Language(id={self.id}, name={self.name!r}, version={self.version!r})"


# ── Types ─────────────────────────────────────────────────────────────────────

@dataclass
class TypeProperty:
    """One named member of a compound abstract type."""
    name:          str
    type:          str
    is_required:   bool = True
    default_value: Any  = None

    def to_dict(self) -> dict:
        d = {"name": self.name, "type": self.type, "isRequired": self.is_required}
        if self.default_value is not None:
            d["defaultValue"] = self.default_value
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "TypeProperty":
        return cls(
            name=d["name"],
            type=d["type"],
            is_required=bool(d.get("isRequired", True)),
            default_value=d.get("defaultValue"),
        )


@dataclass
class TypeDefinition:
    """An abstract type such as "Number" or "List", drawn in *color* by the editor."""
    name:        str
    description: str                 = ""
    color:       str                 = "#808080"
    base_type:   Optional[int]       = None
    properties:  list[TypeProperty]  = field(default_factory=list)
    id:          Optional[int]       = None

    def to_dict(self) -> dict:
        d: dict = {
            "name":        self.name,
            "description": self.description,
            "color":       self.color,
        }
        if self.base_type is not None:
            d["baseType"] = self.base_type
        if self.properties:
            d["properties"] = [p.to_dict() for p in self.properties]
        return d

    @classmethod
    def from_dict(cls, d: dict, record_id: Optional[int] = None) -> "TypeDefinition":
        return cls(
            name=d["name"],
            description=d.get("description", ""),
            color=d.get("color", "#808080"),
            base_type=d.get("baseType"),
            properties=[TypeProperty.from_dict(p) for p in d.get("properties", [])],
            id=record_id if record_id is not None else d.get("id"),
        )


# ── Functions ─────────────────────────────────────────────────────────────────

@dataclass
class Parameter:
    name:          str
    type:          str          # abstract type name
    description:   str  = ""
    is_required:   bool = True
    default_value: Any  = None

    def to_dict(self) -> dict:
        d = {
            "name":        self.name,
            "type":        self.type,
            "description": self.description,
            "isRequired":  self.is_required,
        }
        if self.default_value is not None:
            d["defaultValue"] = self.default_value
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Parameter":
        return cls(
            name=d["name"],
            type=d.get("type", "Any"),
            description=d.get("description", ""),
            is_required=bool(d.get("isRequired", True)),
            default_value=d.get("defaultValue"),
        )


@dataclass
class FunctionDefinition:
    """
    A function node offered by the visual editor.

    Fields
    ──────
    name         — unique internal name, e.g. "math_add"
    display_name — label shown to the user, e.g. "Add"
    category     — FunctionCategory
    parameters   — ordered Parameter list
    return_type  — abstract type name
    is_builtin   — shipped with the seed fixture (vs. user-defined)
    tags         — search keywords
    """
    name:         str
    display_name: str
    description:  str                 = ""
    category:     FunctionCategory    = FunctionCategory.CUSTOM
    parameters:   list[Parameter]     = field(default_factory=list)
    return_type:  str                 = "None"
    is_builtin:   bool                = False
    tags:         list[str]           = field(default_factory=list)
    id:           Optional[int]       = None

    def __post_init__(self) -> None:
        self.category = _coerce(FunctionCategory, self.category)

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on name, display name, description and tags."""
        q = query.lower()
        return (
            q in self.name.lower()
            or q in self.display_name.lower()
            or q in self.description.lower()
            or any(q in tag.lower() for tag in self.tags)
        )

    def to_dict(self) -> dict:
        return {
            "name":        self.name,
            "displayName": self.display_name,
            "description": self.description,
            "category":    self.category.value,
            "parameters":  [p.to_dict() for p in self.parameters],
            "returnType":  self.return_type,
            "isBuiltIn":   self.is_builtin,
            "tags":        list(self.tags),
        }

    @classmethod
    def from_dict(cls, d: dict, record_id: Optional[int] = None) -> "FunctionDefinition":
        return cls(
            name=d["name"],
            display_name=d.get("displayName", d["name"]),
            description=d.get("description", ""),
            category=d.get("category", FunctionCategory.CUSTOM.value),
            parameters=[Parameter.from_dict(p) for p in d.get("parameters", [])],
            return_type=d.get("returnType", "None"),
            is_builtin=bool(d.get("isBuiltIn", False)),
            tags=list(d.get("tags", [])),
            id=record_id if record_id is not None else d.get("id"),
        )

    def __str__(self) -> str:
        return f"FunctionDefinition(id={self.id}, name={self.name!r}, category={self.category.value!r})"


# ── Patterns & mappings ───────────────────────────────────────────────────────

@dataclass
class SyntaxPattern:
    """
    Code template for one function in one language.

    ``pattern`` holds positional placeholders ({0}, {1}, …) that are
    replaced with argument expressions at generation time.
    """
    function_id:        int
    language_id:        int
    pattern:            str
    pattern_type:       PatternType     = PatternType.EXPRESSION
    additional_imports: list[str]       = field(default_factory=list)
    notes:              Optional[str]   = None
    id:                 Optional[int]   = None

    def __post_init__(self) -> None:
        self.pattern_type = _coerce(PatternType, self.pattern_type)

    def render(self, *args: str) -> str:
        """
        Substitute *args* into the positional placeholders.

        Placeholders without a matching argument become empty strings.
        Literal braces (e.g. the ``{}`` dict pattern) are left alone.
        """
        def _arg(m: "re.Match[str]") -> str:
            index = int(m.group(1))
            return args[index] if index < len(args) else ""

        return _PLACEHOLDER_RE.sub(_arg, self.pattern)

    def to_dict(self) -> dict:
        d: dict = {
            "functionId":        self.function_id,
            "languageId":        self.language_id,
            "pattern":           self.pattern,
            "patternType":       self.pattern_type.value,
            "additionalImports": list(self.additional_imports),
        }
        if self.notes is not None:
            d["notes"] = self.notes
        return d

    @classmethod
    def from_dict(cls, d: dict, record_id: Optional[int] = None) -> "SyntaxPattern":
        return cls(
            function_id=d["functionId"],
            language_id=d["languageId"],
            pattern=d["pattern"],
            pattern_type=d.get("patternType", PatternType.EXPRESSION.value),
            additional_imports=list(d.get("additionalImports") or []),
            notes=d.get("notes"),
            id=record_id if record_id is not None else d.get("id"),
        )


@dataclass
class TypeMapping:
    """Concrete type expression used for an abstract type in one language."""
    abstract_type_id:         int
    language_id:              int
    concrete_type:            str
    imports:                  list[str]       = field(default_factory=list)
    conversion_to_abstract:   Optional[str]   = None
    conversion_from_abstract: Optional[str]   = None
    id:                       Optional[int]   = None

    def to_dict(self) -> dict:
        d: dict = {
            "abstractTypeId": self.abstract_type_id,
            "languageId":     self.language_id,
            "concreteType":   self.concrete_type,
            "imports":        list(self.imports),
        }
        if self.conversion_to_abstract is not None:
            d["conversionToAbstract"] = self.conversion_to_abstract
        if self.conversion_from_abstract is not None:
            d["conversionFromAbstract"] = self.conversion_from_abstract
        return d

    @classmethod
    def from_dict(cls, d: dict, record_id: Optional[int] = None) -> "TypeMapping":
        return cls(
            abstract_type_id=d["abstractTypeId"],
            language_id=d["languageId"],
            concrete_type=d["concreteType"],
            imports=list(d.get("imports") or []),
            conversion_to_abstract=d.get("conversionToAbstract"),
            conversion_from_abstract=d.get("conversionFromAbstract"),
            id=record_id if record_id is not None else d.get("id"),
        )
