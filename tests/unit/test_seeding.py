"""
Unit tests for syntaxdb/seeding/

Coverage plan
─────────────
helpers.py        → categorize_function prefixes / keywords, generate_tags
base.py           → get_provider factory, unsupported language
python_fixture.py → language, types, mappings, functions, patterns
"""

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# 1. Helpers
# ─────────────────────────────────────────────────────────────────────────────

class TestCategorizeFunction:

    @pytest.mark.parametrize("name, expected", [
        ("math_floor",  "Math"),
        ("add",         "Math"),
        ("str_upper",   "String"),
        ("to_string",   "String"),
        ("list_append", "Array"),
        ("array_push",  "Array"),
        ("dict_keys",   "Object"),
        ("obj_merge",   "Object"),
        ("while_loop",  "Control Flow"),
        ("print",       "Input/Output"),
        ("read_file",   "Input/Output"),
        ("to_int",      "Conversion"),
        ("get_date",    "Date & Time"),
        ("len",         "Utility"),
    ])
    def test_categories(self, name, expected):
        from syntaxdb.seeding import categorize_function
        assert categorize_function(name).value == expected

    def test_prefix_is_case_insensitive(self):
        from syntaxdb.seeding import categorize_function
        from syntaxdb.store.models import FunctionCategory
        assert categorize_function("MATH_Sqrt") is FunctionCategory.MATH


class TestGenerateTags:

    def test_category_then_name_parts(self):
        from syntaxdb.seeding import generate_tags
        from syntaxdb.store.models import FunctionCategory
        assert generate_tags("list_append", FunctionCategory.ARRAY) == ["array", "list", "append"]

    def test_duplicates_dropped(self):
        from syntaxdb.seeding import generate_tags
        from syntaxdb.store.models import FunctionCategory
        assert generate_tags("math_math", FunctionCategory.MATH) == ["math"]

    def test_async_static_and_extra_tags(self):
        from syntaxdb.seeding import generate_tags
        from syntaxdb.store.models import FunctionCategory
        tags = generate_tags("fetch", FunctionCategory.IO, is_async=True, is_static=True, extra=["net"])
        assert tags == ["input/output", "fetch", "net", "async", "static"]


# ─────────────────────────────────────────────────────────────────────────────
# 2. Provider factory
# ─────────────────────────────────────────────────────────────────────────────

class TestGetProvider:

    def test_default_is_python(self):
        from syntaxdb.seeding import PythonSeedProvider, get_provider
        assert isinstance(get_provider(), PythonSeedProvider)

    def test_lookup_is_case_insensitive(self):
        from syntaxdb.seeding import get_provider
        assert get_provider("python").language_name == "Python"

    def test_unsupported_language_raises(self):
        from syntaxdb.exceptions import SeedError, UnsupportedLanguageError
        from syntaxdb.seeding import get_provider
        with pytest.raises(UnsupportedLanguageError):
            get_provider("Brainfuck")
        assert issubclass(UnsupportedLanguageError, SeedError)

    def test_available_providers(self):
        from syntaxdb.seeding import available_providers
        assert "Python" in available_providers()

    def test_abstract_base_cannot_be_instantiated(self):
        from syntaxdb.seeding import SeedFixtureProvider
        with pytest.raises(TypeError):
            SeedFixtureProvider()


# ─────────────────────────────────────────────────────────────────────────────
# 3. Python fixture
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def provider():
    from syntaxdb.seeding import PythonSeedProvider
    return PythonSeedProvider()


class TestPythonFixture:

    def test_language_definition(self, provider):
        lang = provider.extract_language_definition()
        assert lang.name == "Python"
        assert lang.version == "3.11"
        assert lang.file_extension == ".py"
        assert lang.id is None
        assert lang.syntax_rules.block_start == ":"
        assert lang.syntax_rules.operator_patterns["floorDivide"] == "{0} // {1}"

    def test_language_rules_are_independent_copies(self, provider):
        first = provider.extract_language_definition()
        first.syntax_rules.operator_patterns["add"] = "changed"
        second = provider.extract_language_definition()
        assert second.syntax_rules.operator_patterns["add"] == "{0} + {1}"

    def test_ten_abstract_types(self, provider):
        types = provider.extract_type_definitions()
        assert [t.name for t in types] == [
            "Number", "String", "Boolean", "List", "Dictionary",
            "Set", "Tuple", "None", "Function", "Any",
        ]
        assert all(t.id is None for t in types)

    def test_type_mappings_use_supplied_ids(self, provider):
        type_ids = {"Number": 10, "String": 11}
        mappings = provider.generate_type_mappings(type_ids, language_id=3)
        assert {(m.abstract_type_id, m.concrete_type) for m in mappings} == {
            (10, "int | float"), (11, "str"),
        }
        assert all(m.language_id == 3 for m in mappings)

    def test_function_names_are_unique(self, provider):
        names = [f.name for f in provider.extract_built_in_functions()]
        assert len(names) == len(set(names))
        assert {"print", "len", "range", "input", "math_add", "dict_get"} <= set(names)

    def test_functions_are_built_in_and_categorised(self, provider):
        from syntaxdb.store.models import FunctionCategory
        functions = {f.name: f for f in provider.extract_built_in_functions()}
        assert all(f.is_builtin for f in functions.values())
        assert functions["print"].category is FunctionCategory.IO
        assert functions["str_split"].category is FunctionCategory.STRING
        assert functions["list_get"].category is FunctionCategory.ARRAY
        assert functions["dict_keys"].category is FunctionCategory.OBJECT
        assert functions["math_ceil"].category is FunctionCategory.MATH
        assert functions["range"].category is FunctionCategory.UTILITY

    def test_one_pattern_per_function(self, provider):
        functions = provider.extract_built_in_functions()
        ids = {f.name: i for i, f in enumerate(functions, start=1)}
        patterns = provider.generate_syntax_patterns(ids, language_id=1)
        assert len(patterns) == len(functions)
        assert {p.function_id for p in patterns} == set(ids.values())

    @pytest.mark.parametrize("name, pattern, pattern_type", [
        ("math_add",    "{0} + {1}",          "expression"),
        ("math_floor",  "math.floor({0})",    "expression"),
        ("str_upper",   "{0}.upper()",        "expression"),
        ("list_set",    "{0}[{1}] = {2}",     "statement"),
        ("dict_create", "{}",                 "expression"),
        ("dict_values", "list({0}.values())", "expression"),
        ("range",       "range({0}, {1}, {2})", "expression"),
        ("str_strip",   "{0}.strip({1})",     "expression"),
        ("list_pop",    "{0}.pop({1})",       "statement"),
        ("frobnicate",  "frobnicate({0})",    "expression"),
    ])
    def test_patterns(self, provider, name, pattern, pattern_type):
        [pat] = provider.generate_syntax_patterns({name: 1}, language_id=1)
        assert pat.pattern == pattern
        assert pat.pattern_type.value == pattern_type

    def test_math_module_patterns_need_import(self, provider):
        [pat] = provider.generate_syntax_patterns({"math_ceil": 1}, language_id=1)
        assert pat.additional_imports == ["import math"]
