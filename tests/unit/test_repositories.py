"""
Unit tests for syntaxdb/repositories/

Coverage plan
─────────────
base.py            → create/get/update/delete contract, DuplicateKey,
                     update-without-id, idempotent delete, error wrapping,
                     ids never reused, bind() shared transactions
language.py        → get_by_name, get_enabled
function.py        → get_by_name, get_by_category, get_built_in, search
pattern.py         → composite key uniqueness and lookup, by language
type_definition.py → get_by_name
type_mapping.py    → composite lookup scenario, by language
"""

from dataclasses import replace

import pytest


@pytest.fixture
def store(tmp_path):
    from syntaxdb.store.db import SyntaxStore
    return SyntaxStore(db_path=str(tmp_path / "repos.db"))


@pytest.fixture
def repos(store):
    from syntaxdb.repositories import Repositories
    return Repositories.for_store(store)


def _language(name="Python", enabled=True):
    from syntaxdb.store.models import Language, SyntaxRules
    return Language(
        name=name,
        version="3.11",
        file_extension=".py",
        syntax_rules=SyntaxRules(block_start=":", operator_patterns={"add": "{0} + {1}"}),
        is_enabled=enabled,
    )


def _function(name="math_add", category="Math", builtin=True, **extra):
    from syntaxdb.store.models import FunctionDefinition, Parameter
    return FunctionDefinition(
        name=name,
        display_name=extra.pop("display_name", name.title()),
        description=extra.pop("description", ""),
        category=category,
        parameters=[Parameter(name="a", type="Number"), Parameter(name="b", type="Number")],
        return_type="Number",
        is_builtin=builtin,
        tags=extra.pop("tags", []),
    )


# ─────────────────────────────────────────────────────────────────────────────
# 1. Generic CRUD contract
# ─────────────────────────────────────────────────────────────────────────────

class TestCreateAndGet:

    async def test_create_returns_positive_int_id(self, repos):
        new_id = await repos.languages.create(_language())
        assert isinstance(new_id, int)
        assert new_id >= 1

    async def test_get_by_id_equals_input_plus_assigned_id(self, repos):
        original = _language()
        new_id = await repos.languages.create(original)
        assert await repos.languages.get_by_id(new_id) == replace(original, id=new_id)

    async def test_create_does_not_mutate_input(self, repos):
        original = _language()
        await repos.languages.create(original)
        assert original.id is None

    async def test_create_ignores_caller_supplied_id(self, repos):
        new_id = await repos.types.create(_type_def("Number", id=500))
        assert new_id != 500

    async def test_get_by_id_miss_returns_none(self, repos):
        assert await repos.functions.get_by_id(12345) is None

    async def test_get_all_empty_partition_returns_empty_list(self, repos):
        assert await repos.patterns.get_all() == []

    async def test_duplicate_name_raises_duplicate_key(self, repos):
        from syntaxdb.exceptions import DuplicateKeyError
        await repos.languages.create(_language("Python"))
        with pytest.raises(DuplicateKeyError) as exc_info:
            await repos.languages.create(_language("Python"))
        assert exc_info.value.operation == "create"
        assert "languages" in str(exc_info.value)

    async def test_not_null_violation_is_operation_error_not_duplicate(self, repos):
        from syntaxdb.exceptions import DuplicateKeyError, OperationError
        with pytest.raises(OperationError) as exc_info:
            await repos.types.create(_type_def(None))
        assert not isinstance(exc_info.value, DuplicateKeyError)

    async def test_ids_are_not_reused_after_delete(self, repos):
        first = await repos.types.create(_type_def("Number"))
        await repos.types.delete(first)
        second = await repos.types.create(_type_def("Number"))
        assert second > first


class TestUpdate:

    async def test_update_replaces_stored_record(self, repos):
        new_id = await repos.languages.create(_language())
        stored = await repos.languages.get_by_id(new_id)
        await repos.languages.update(replace(stored, version="3.12", is_enabled=False))
        fetched = await repos.languages.get_by_id(new_id)
        assert fetched.version == "3.12"
        assert fetched.is_enabled is False

    async def test_update_moves_indexed_columns(self, repos):
        new_id = await repos.functions.create(_function("math_add"))
        stored = await repos.functions.get_by_id(new_id)
        await repos.functions.update(replace(stored, name="math_sum"))
        assert await repos.functions.get_by_name("math_add") is None
        assert (await repos.functions.get_by_name("math_sum")).id == new_id

    async def test_update_without_id_raises_before_storage_access(self, tmp_path):
        from syntaxdb.exceptions import InvalidArgumentError
        from syntaxdb.repositories import LanguageRepository
        from syntaxdb.store.db import SyntaxStore
        # a directory path would fail with StoreOpenError if storage were touched
        repo = LanguageRepository(SyntaxStore(db_path=str(tmp_path)))
        with pytest.raises(InvalidArgumentError):
            await repo.update(_language())

    async def test_update_into_existing_name_raises_duplicate_key(self, repos):
        from syntaxdb.exceptions import DuplicateKeyError
        await repos.languages.create(_language("Python"))
        js_id = await repos.languages.create(_language("JavaScript"))
        js = await repos.languages.get_by_id(js_id)
        with pytest.raises(DuplicateKeyError):
            await repos.languages.update(replace(js, name="Python"))


class TestDelete:

    async def test_delete_removes_record(self, repos):
        new_id = await repos.types.create(_type_def("Number"))
        await repos.types.delete(new_id)
        assert await repos.types.get_by_id(new_id) is None

    async def test_delete_is_idempotent(self, repos):
        new_id = await repos.types.create(_type_def("Number"))
        await repos.types.delete(new_id)
        await repos.types.delete(new_id)
        await repos.types.delete(999)

    async def test_delete_does_not_cascade(self, repos):
        lang_id = await repos.languages.create(_language())
        fn_id = await repos.functions.create(_function())
        await repos.patterns.create(_pattern(fn_id, lang_id))
        await repos.functions.delete(fn_id)
        assert len(await repos.patterns.get_by_language(lang_id)) == 1


class TestBind:
    """bind() — several repositories share one caller-owned transaction."""

    async def test_bound_writes_commit_together(self, store, repos):
        async with store.transaction() as conn:
            bound = repos.bind(conn)
            await bound.languages.create(_language())
            await bound.types.create(_type_def("Number"))
        assert await repos.languages.count() == 1
        assert await repos.types.count() == 1

    async def test_bound_writes_roll_back_together(self, store, repos):
        from syntaxdb.exceptions import DuplicateKeyError
        with pytest.raises(DuplicateKeyError):
            async with store.transaction() as conn:
                bound = repos.bind(conn)
                await bound.languages.create(_language())
                await bound.types.create(_type_def("Number"))
                await bound.types.create(_type_def("Number"))
        assert await repos.languages.count() == 0
        assert await repos.types.count() == 0


# ─────────────────────────────────────────────────────────────────────────────
# 2. Entity lookups
# ─────────────────────────────────────────────────────────────────────────────

class TestLanguageRepository:

    async def test_get_by_name(self, repos):
        new_id = await repos.languages.create(_language("Python"))
        assert (await repos.languages.get_by_name("Python")).id == new_id
        assert await repos.languages.get_by_name("Cobol") is None

    async def test_get_enabled(self, repos):
        await repos.languages.create(_language("Python", enabled=True))
        await repos.languages.create(_language("Perl", enabled=False))
        names = [lang.name for lang in await repos.languages.get_enabled()]
        assert names == ["Python"]


class TestFunctionRepository:

    async def test_get_by_category_accepts_enum_and_string(self, repos):
        from syntaxdb.store.models import FunctionCategory
        await repos.functions.create(_function("math_add", "Math"))
        await repos.functions.create(_function("print", "Input/Output"))
        assert [f.name for f in await repos.functions.get_by_category(FunctionCategory.IO)] == ["print"]
        assert [f.name for f in await repos.functions.get_by_category("Math")] == ["math_add"]

    async def test_get_by_category_unknown_is_empty(self, repos):
        await repos.functions.create(_function())
        assert await repos.functions.get_by_category("Sorcery") == []

    async def test_get_built_in(self, repos):
        await repos.functions.create(_function("print", builtin=True))
        await repos.functions.create(_function("my_helper", builtin=False))
        assert [f.name for f in await repos.functions.get_built_in()] == ["print"]

    @pytest.mark.parametrize("query", ["", "   "])
    async def test_blank_search_returns_everything(self, repos, query):
        await repos.functions.create(_function("math_add"))
        await repos.functions.create(_function("str_upper", "String"))
        assert len(await repos.functions.search(query)) == 2

    async def test_search_matches_tags_case_insensitively(self, repos):
        await repos.functions.create(_function("math_add", tags=["plus", "sum"]))
        await repos.functions.create(_function("str_upper", "String", tags=["case"]))
        results = await repos.functions.search("SUM")
        assert [f.name for f in results] == ["math_add"]

    async def test_search_matches_description(self, repos):
        await repos.functions.create(_function("math_floor", description="Rounds down"))
        assert len(await repos.functions.search("rounds")) == 1


def _pattern(function_id, language_id, text="{0} + {1}"):
    from syntaxdb.store.models import SyntaxPattern
    return SyntaxPattern(function_id=function_id, language_id=language_id, pattern=text)


def _type_def(name, **extra):
    from syntaxdb.store.models import TypeDefinition
    return TypeDefinition(name=name, description="", color="#808080", **extra)


class TestSyntaxPatternRepository:

    async def test_composite_key_is_unique(self, repos):
        from syntaxdb.exceptions import DuplicateKeyError
        await repos.patterns.create(_pattern(1, 1))
        with pytest.raises(DuplicateKeyError):
            await repos.patterns.create(_pattern(1, 1, "other"))

    async def test_same_function_in_two_languages(self, repos):
        await repos.patterns.create(_pattern(1, 1, "{0} + {1}"))
        await repos.patterns.create(_pattern(1, 2, "add({0}, {1})"))
        assert (await repos.patterns.get_by_function_and_language(1, 2)).pattern == "add({0}, {1})"

    async def test_lookup_miss_returns_none(self, repos):
        assert await repos.patterns.get_by_function_and_language(1, 1) is None

    async def test_get_by_language(self, repos):
        await repos.patterns.create(_pattern(1, 1))
        await repos.patterns.create(_pattern(2, 1))
        await repos.patterns.create(_pattern(1, 2))
        assert len(await repos.patterns.get_by_language(1)) == 2
        assert await repos.patterns.get_by_language(3) == []


class TestTypeRepositories:

    async def test_type_get_by_name(self, repos):
        new_id = await repos.types.create(_type_def("Number"))
        assert (await repos.types.get_by_name("Number")).id == new_id

    async def test_mapping_lookup_scenario(self, repos):
        from syntaxdb.store.models import TypeMapping
        lang_id = await repos.languages.create(_language("L1"))
        type_id = await repos.types.create(_type_def("Number"))
        await repos.type_mappings.create(
            TypeMapping(abstract_type_id=type_id, language_id=lang_id, concrete_type="int")
        )
        found = await repos.type_mappings.get_by_type_and_language(type_id, lang_id)
        assert found.concrete_type == "int"
        assert await repos.type_mappings.get_by_type_and_language(type_id, lang_id + 1) is None

    async def test_duplicate_mapping_raises(self, repos):
        from syntaxdb.exceptions import DuplicateKeyError
        from syntaxdb.store.models import TypeMapping
        await repos.type_mappings.create(TypeMapping(1, 1, "int"))
        with pytest.raises(DuplicateKeyError):
            await repos.type_mappings.create(TypeMapping(1, 1, "float"))

    async def test_mappings_by_language(self, repos):
        from syntaxdb.store.models import TypeMapping
        await repos.type_mappings.create(TypeMapping(1, 1, "int"))
        await repos.type_mappings.create(TypeMapping(2, 1, "str"))
        await repos.type_mappings.create(TypeMapping(1, 2, "number"))
        assert {m.concrete_type for m in await repos.type_mappings.get_by_language(1)} == {"int", "str"}
