"""
Python 3.11 seed fixture.

Supplies the language record with its syntax rules, ten abstract types
and their Python mappings, a small catalogue of built-ins and common
string/list/dict/math operations, and one code pattern per function.
"""

import copy
import logging
from typing import Any, Optional

from syntaxdb.store.models import (
    FunctionDefinition,
    Language,
    Parameter,
    PatternType,
    SyntaxPattern,
    SyntaxRules,
    TypeDefinition,
    TypeMapping,
)

from .base import SeedFixtureProvider
from .helpers import categorize_function, generate_tags

__all__ = ["PythonSeedProvider", "PYTHON_SYNTAX_RULES"]

logger = logging.getLogger(__name__)


PYTHON_SYNTAX_RULES = SyntaxRules(
    statement_delimiter="\n",
    block_start=":",
    block_end="",
    comment_single="#",
    comment_multi_start='"""',
    comment_multi_end='"""',
    string_delimiters=['"', "'"],
    indentation_style="space",
    indentation_size=4,
    function_definition_pattern="def {name}({parameters}):\n{body}",
    variable_declaration_pattern="{name} = {value}",
    operator_patterns={
        # arithmetic
        "add":                "{0} + {1}",
        "subtract":           "{0} - {1}",
        "multiply":           "{0} * {1}",
        "divide":             "{0} / {1}",
        "modulo":             "{0} % {1}",
        "power":              "{0} ** {1}",
        "floorDivide":        "{0} // {1}",
        # comparison
        "equals":             "{0} == {1}",
        "notEquals":          "{0} != {1}",
        "lessThan":           "{0} < {1}",
        "greaterThan":        "{0} > {1}",
        "lessThanOrEqual":    "{0} <= {1}",
        "greaterThanOrEqual": "{0} >= {1}",
        # logical
        "and":                "{0} and {1}",
        "or":                 "{0} or {1}",
        "not":                "not {0}",
        # bitwise
        "bitwiseAnd":         "{0} & {1}",
        "bitwiseOr":          "{0} | {1}",
        "bitwiseXor":         "{0} ^ {1}",
        "bitwiseNot":         "~{0}",
        "leftShift":          "{0} << {1}",
        "rightShift":         "{0} >> {1}",
        # other
        "assign":             "{0} = {1}",
        "in":                 "{0} in {1}",
        "notIn":              "{0} not in {1}",
        "is":                 "{0} is {1}",
        "isNot":              "{0} is not {1}",
    },
)

# (name, description, colour)
_TYPES: list[tuple[str, str, str]] = [
    ("Number",     "Numeric value (int, float, complex)",  "#6B8E23"),
    ("String",     "Text value",                           "#4682B4"),
    ("Boolean",    "True or False value",                  "#B22222"),
    ("List",       "Ordered collection of items",          "#8A2BE2"),
    ("Dictionary", "Key-value pairs",                      "#FF8C00"),
    ("Set",        "Unordered collection of unique items", "#2F4F4F"),
    ("Tuple",      "Immutable ordered collection",         "#800080"),
    ("None",       "Null value",                           "#708090"),
    ("Function",   "Callable function or method",          "#CD5C5C"),
    ("Any",        "Any type",                             "#808080"),
]

# abstract type name → Python type expression
_CONCRETE_TYPES: dict[str, str] = {
    "Number":     "int | float",
    "String":     "str",
    "Boolean":    "bool",
    "List":       "list",
    "Dictionary": "dict",
    "Set":        "set",
    "Tuple":      "tuple",
    "None":       "None",
    "Function":   "callable",
    "Any":        "any",
}

# Per-prefix operation patterns: op → (pattern, pattern type, imports)
_E, _S = PatternType.EXPRESSION, PatternType.STATEMENT

_STRING_PATTERNS = {
    "concat": ("{0} + {1}",      _E, []),
    "upper":  ("{0}.upper()",    _E, []),
    "lower":  ("{0}.lower()",    _E, []),
    "split":  ("{0}.split({1})", _E, []),
    "join":   ("{0}.join({1})",  _E, []),
}

_LIST_PATTERNS = {
    "create": ("[{0}]",           _E, []),
    "append": ("{0}.append({1})", _S, []),
    "get":    ("{0}[{1}]",        _E, []),
    "set":    ("{0}[{1}] = {2}",  _S, []),
    "length": ("len({0})",        _E, []),
}

_DICT_PATTERNS = {
    "create": ("{}",                  _E, []),
    "get":    ("{0}.get({1}, {2})",   _E, []),
    "set":    ("{0}[{1}] = {2}",      _S, []),
    "keys":   ("list({0}.keys())",    _E, []),
    "values": ("list({0}.values())",  _E, []),
}

_MATH_PATTERNS = {
    "add":      ("{0} + {1}",        _E, []),
    "subtract": ("{0} - {1}",        _E, []),
    "multiply": ("{0} * {1}",        _E, []),
    "divide":   ("{0} / {1}",        _E, []),
    "floor":    ("math.floor({0})",  _E, ["import math"]),
    "ceil":     ("math.ceil({0})",   _E, ["import math"]),
}

_BUILTIN_PATTERNS = {
    "print": "print({0})",
    "len":   "len({0})",
    "range": "range({0}, {1}, {2})",
    "input": "input({0})",
}


def _param(
    name: str,
    type_name: str,
    description: str,
    required: bool = True,
    default: Any = None,
) -> Parameter:
    return Parameter(
        name=name,
        type=type_name,
        description=description,
        is_required=required,
        default_value=default,
    )


def _function(
    name: str,
    display_name: str,
    description: str,
    parameters: list[Parameter],
    return_type: str,
    tags: Optional[list[str]] = None,
) -> FunctionDefinition:
    category = categorize_function(name)
    return FunctionDefinition(
        name=name,
        display_name=display_name,
        description=description,
        category=category,
        parameters=parameters,
        return_type=return_type,
        is_builtin=True,
        tags=tags if tags is not None else generate_tags(name, category),
    )


class PythonSeedProvider(SeedFixtureProvider):
    """Seed fixture for Python 3.11."""

    language_name = "Python"

    def extract_language_definition(self) -> Language:
        return Language(
            name=self.language_name,
            version="3.11",
            file_extension=".py",
            syntax_rules=copy.deepcopy(PYTHON_SYNTAX_RULES),
            is_enabled=True,
            description="General-purpose, dynamically typed programming language",
            website="https://www.python.org",
        )

    def extract_type_definitions(self) -> list[TypeDefinition]:
        return [
            TypeDefinition(name=name, description=desc, color=color)
            for name, desc, color in _TYPES
        ]

    def generate_type_mappings(
        self,
        type_ids: dict[str, int],
        language_id: int,
    ) -> list[TypeMapping]:
        mappings = []
        for type_name, concrete in _CONCRETE_TYPES.items():
            if type_name not in type_ids:
                logger.debug("No id for abstract type %s, mapping skipped", type_name)
                continue
            mappings.append(
                TypeMapping(
                    abstract_type_id=type_ids[type_name],
                    language_id=language_id,
                    concrete_type=concrete,
                )
            )
        return mappings

    def extract_built_in_functions(self) -> list[FunctionDefinition]:
        return (
            self._basic_builtins()
            + self._string_operations()
            + self._list_operations()
            + self._dict_operations()
            + self._math_operations()
        )

    def generate_syntax_patterns(
        self,
        function_ids: dict[str, int],
        language_id: int,
    ) -> list[SyntaxPattern]:
        patterns = []
        for name, function_id in function_ids.items():
            pattern, pattern_type, imports = self._pattern_for(name)
            patterns.append(
                SyntaxPattern(
                    function_id=function_id,
                    language_id=language_id,
                    pattern=pattern,
                    pattern_type=pattern_type,
                    additional_imports=list(imports),
                )
            )
        return patterns

    # ── Patterns ──────────────────────────────────────────────────────────

    @staticmethod
    def _pattern_for(name: str) -> tuple[str, PatternType, list[str]]:
        """
        Pattern for a function name.  Prefixed names look up their
        operation table; unknown operations fall back to a method call
        (or a ``math.`` call for math_*).  Unprefixed names are called
        directly.
        """
        prefix, _, op = name.partition("_")
        if op:
            if prefix == "str":
                return _STRING_PATTERNS.get(op, (f"{{0}}.{op}({{1}})", _E, []))
            if prefix == "list":
                return _LIST_PATTERNS.get(op, (f"{{0}}.{op}({{1}})", _S, []))
            if prefix == "dict":
                return _DICT_PATTERNS.get(op, (f"{{0}}.{op}({{1}})", _E, []))
            if prefix == "math":
                return _MATH_PATTERNS.get(op, (f"math.{op}({{0}})", _E, ["import math"]))
        return _BUILTIN_PATTERNS.get(name, f"{name}({{0}})"), _E, []

    # ── Function catalogue ────────────────────────────────────────────────

    @staticmethod
    def _basic_builtins() -> list[FunctionDefinition]:
        return [
            _function(
                "print", "Print", "Prints the specified message to the console",
                [_param("value", "Any", "The value to print")],
                "None", ["print", "output", "console", "io"],
            ),
            _function(
                "len", "Length", "Returns the number of items in an object",
                [_param("obj", "Any", "The object to get the length of")],
                "Number", ["length", "size", "count", "utility"],
            ),
            _function(
                "range", "Range", "Returns a sequence of numbers",
                [
                    _param("start", "Number", "Starting value (inclusive)", False, 0),
                    _param("stop", "Number", "Ending value (exclusive)"),
                    _param("step", "Number", "Step value", False, 1),
                ],
                "List", ["range", "sequence", "numbers", "utility"],
            ),
            _function(
                "input", "Input", "Reads a line from input",
                [_param("prompt", "String", "The prompt to display", False, "")],
                "String", ["input", "read", "console", "io"],
            ),
        ]

    @staticmethod
    def _string_operations() -> list[FunctionDefinition]:
        return [
            _function(
                "str_concat", "Concatenate Strings", "Joins two strings together",
                [
                    _param("str1", "String", "First string"),
                    _param("str2", "String", "Second string"),
                ],
                "String", ["string", "concatenate", "join"],
            ),
            _function(
                "str_upper", "Uppercase", "Converts a string to uppercase",
                [_param("str", "String", "The string to convert")],
                "String", ["string", "uppercase", "case"],
            ),
            _function(
                "str_lower", "Lowercase", "Converts a string to lowercase",
                [_param("str", "String", "The string to convert")],
                "String", ["string", "lowercase", "case"],
            ),
            _function(
                "str_split", "Split String", "Splits a string into a list by a separator",
                [
                    _param("str", "String", "The string to split"),
                    _param("separator", "String", "The separator to split by", False, " "),
                ],
                "List", ["string", "split", "separator"],
            ),
            _function(
                "str_join", "Join Strings",
                "Joins items in a list into a string with a separator",
                [
                    _param("separator", "String", "The separator to join with"),
                    _param("items", "List", "The items to join"),
                ],
                "String", ["string", "join", "separator"],
            ),
        ]

    @staticmethod
    def _list_operations() -> list[FunctionDefinition]:
        return [
            _function(
                "list_create", "Create List", "Creates a new list",
                [_param("items", "Any", "Items to add to the list (comma-separated)", False, [])],
                "List", ["list", "create", "array"],
            ),
            _function(
                "list_append", "Append to List", "Adds an item to the end of a list",
                [
                    _param("list", "List", "The list to modify"),
                    _param("item", "Any", "The item to add"),
                ],
                "None", ["list", "append", "add", "array"],
            ),
            _function(
                "list_get", "Get List Item", "Gets an item from a list at the specified index",
                [
                    _param("list", "List", "The source list"),
                    _param("index", "Number", "The index of the item to get"),
                ],
                "Any", ["list", "get", "index", "array"],
            ),
            _function(
                "list_set", "Set List Item", "Sets an item in a list at the specified index",
                [
                    _param("list", "List", "The list to modify"),
                    _param("index", "Number", "The index of the item to set"),
                    _param("value", "Any", "The new value"),
                ],
                "None", ["list", "set", "index", "array"],
            ),
            _function(
                "list_length", "List Length", "Gets the length of a list",
                [_param("list", "List", "The list to get the length of")],
                "Number", ["list", "length", "size", "array"],
            ),
        ]

    @staticmethod
    def _dict_operations() -> list[FunctionDefinition]:
        return [
            _function(
                "dict_create", "Create Dictionary", "Creates a new dictionary",
                [], "Dictionary", ["dict", "create", "object"],
            ),
            _function(
                "dict_get", "Get Dictionary Value", "Gets a value from a dictionary by key",
                [
                    _param("dict", "Dictionary", "The source dictionary"),
                    _param("key", "Any", "The key to look up"),
                    _param("default", "Any", "Default value if key is not found", False),
                ],
                "Any", ["dict", "get", "key", "object"],
            ),
            _function(
                "dict_set", "Set Dictionary Value",
                "Sets a value in a dictionary for the specified key",
                [
                    _param("dict", "Dictionary", "The dictionary to modify"),
                    _param("key", "Any", "The key to set"),
                    _param("value", "Any", "The value to set"),
                ],
                "None", ["dict", "set", "key", "object"],
            ),
            _function(
                "dict_keys", "Dictionary Keys", "Gets all keys from a dictionary",
                [_param("dict", "Dictionary", "The source dictionary")],
                "List", ["dict", "keys", "object"],
            ),
            _function(
                "dict_values", "Dictionary Values", "Gets all values from a dictionary",
                [_param("dict", "Dictionary", "The source dictionary")],
                "List", ["dict", "values", "object"],
            ),
        ]

    @staticmethod
    def _math_operations() -> list[FunctionDefinition]:
        return [
            _function(
                "math_add", "Add", "Adds two numbers",
                [_param("a", "Number", "First number"), _param("b", "Number", "Second number")],
                "Number", ["math", "add", "plus", "sum"],
            ),
            _function(
                "math_subtract", "Subtract", "Subtracts the second number from the first",
                [
                    _param("a", "Number", "Number to subtract from"),
                    _param("b", "Number", "Number to subtract"),
                ],
                "Number", ["math", "subtract", "minus", "difference"],
            ),
            _function(
                "math_multiply", "Multiply", "Multiplies two numbers",
                [_param("a", "Number", "First number"), _param("b", "Number", "Second number")],
                "Number", ["math", "multiply", "times", "product"],
            ),
            _function(
                "math_divide", "Divide", "Divides the first number by the second",
                [
                    _param("a", "Number", "Number to divide"),
                    _param("b", "Number", "Number to divide by"),
                ],
                "Number", ["math", "divide", "quotient"],
            ),
            _function(
                "math_floor", "Floor",
                "Returns the largest integer less than or equal to the number",
                [_param("x", "Number", "The number to floor")],
                "Number", ["math", "floor", "round", "down"],
            ),
            _function(
                "math_ceil", "Ceiling",
                "Returns the smallest integer greater than or equal to the number",
                [_param("x", "Number", "The number to ceil")],
                "Number", ["math", "ceiling", "ceil", "round", "up"],
            ),
        ]
