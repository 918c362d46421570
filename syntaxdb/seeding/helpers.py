"""Heuristics shared by seed fixture providers."""

from typing import Optional

from syntaxdb.store.models import FunctionCategory

__all__ = ["categorize_function", "generate_tags"]

_MATH_NAMES = {"add", "subtract", "multiply", "divide"}


def categorize_function(name: str) -> FunctionCategory:
    """
    Guess a function's category from its name.

    Prefixes (math_, str_, list_, dict_ …) win over keywords found anywhere
    in the name; anything unrecognised is Utility.
    """
    lower = name.lower()
    if lower.startswith("math_") or lower in _MATH_NAMES:
        return FunctionCategory.MATH
    if lower.startswith("str_") or "string" in lower:
        return FunctionCategory.STRING
    if lower.startswith(("array_", "list_")):
        return FunctionCategory.ARRAY
    if lower.startswith(("dict_", "obj_", "object_")):
        return FunctionCategory.OBJECT
    if any(word in lower for word in ("if", "loop", "while", "for")):
        return FunctionCategory.CONTROL_FLOW
    if any(word in lower for word in ("print", "input", "read", "write")):
        return FunctionCategory.IO
    if any(word in lower for word in ("to_", "convert", "parse")):
        return FunctionCategory.CONVERSION
    if "date" in lower or "time" in lower:
        return FunctionCategory.DATE_TIME
    return FunctionCategory.UTILITY


def generate_tags(
    name: str,
    category: FunctionCategory,
    is_async: bool = False,
    is_static: bool = False,
    extra: Optional[list[str]] = None,
) -> list[str]:
    """
    Search tags for a function: the lower-cased category, then each
    underscore-separated part of the name, then any *extra* tags.
    Duplicates are dropped, first occurrence wins.
    """
    tags = [category.value.lower()]
    candidates = name.split("_") + list(extra or [])
    if is_async:
        candidates.append("async")
    if is_static:
        candidates.append("static")
    for tag in candidates:
        if tag and tag not in tags:
            tags.append(tag)
    return tags
