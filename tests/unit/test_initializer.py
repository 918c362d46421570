"""
Unit tests for syntaxdb/initializer.py

Coverage plan
─────────────
initialize()     → schema + seed on empty store, idempotent
seed_if_needed() → skipped when any language exists, return value
seeding          → order-dependent references resolve, failure rolls back
clear()          → every partition emptied
reset()          → exactly one fixture afterwards
"""

import pytest


@pytest.fixture
def store(tmp_path):
    from syntaxdb.store.db import SyntaxStore
    return SyntaxStore(db_path=str(tmp_path / "init.db"))


@pytest.fixture
def repos(store):
    from syntaxdb.repositories import Repositories
    return Repositories.for_store(store)


@pytest.fixture
def initializer(store):
    from syntaxdb.initializer import DatabaseInitializer
    return DatabaseInitializer(store)


def _failing_provider():
    from syntaxdb.seeding import PythonSeedProvider

    class FailingPatternsProvider(PythonSeedProvider):
        def generate_syntax_patterns(self, function_ids, language_id):
            raise RuntimeError("pattern fixture unavailable")

    return FailingPatternsProvider()


async def _counts(repos):
    return (
        await repos.languages.count(),
        await repos.types.count(),
        await repos.type_mappings.count(),
        await repos.functions.count(),
        await repos.patterns.count(),
    )


class TestInitialize:

    async def test_seeds_empty_store(self, initializer, repos):
        await initializer.initialize()
        provider = initializer.provider
        n_types = len(provider.extract_type_definitions())
        n_functions = len(provider.extract_built_in_functions())
        assert await _counts(repos) == (1, n_types, n_types, n_functions, n_functions)

    async def test_is_idempotent(self, initializer, repos):
        await initializer.initialize()
        first = await _counts(repos)
        await initializer.initialize()
        assert await _counts(repos) == first
        assert (await repos.languages.count()) == 1

    async def test_references_point_at_seeded_records(self, initializer, repos):
        await initializer.initialize()
        python = await repos.languages.get_by_name("Python")
        number = await repos.types.get_by_name("Number")
        mapping = await repos.type_mappings.get_by_type_and_language(number.id, python.id)
        assert mapping.concrete_type == "int | float"

        add = await repos.functions.get_by_name("math_add")
        pattern = await repos.patterns.get_by_function_and_language(add.id, python.id)
        assert pattern.render("a", "b") == "a + b"


class TestSeedIfNeeded:

    async def test_returns_true_when_seeded(self, store, initializer):
        await store.open()
        assert await initializer.seed_if_needed() is True

    async def test_skipped_when_any_language_exists(self, store, initializer, repos):
        from syntaxdb.store.models import Language
        await repos.languages.create(Language(name="Rust", version="1.80"))
        assert await initializer.seed_if_needed() is False
        assert await repos.functions.count() == 0

    async def test_failure_leaves_every_partition_empty(self, store, repos):
        from syntaxdb.initializer import DatabaseInitializer
        failing = DatabaseInitializer(store, provider=_failing_provider())
        with pytest.raises(RuntimeError, match="pattern fixture"):
            await failing.initialize()
        assert await _counts(repos) == (0, 0, 0, 0, 0)

    async def test_retry_after_failure_succeeds(self, store, repos):
        from syntaxdb.initializer import DatabaseInitializer
        with pytest.raises(RuntimeError):
            await DatabaseInitializer(store, provider=_failing_provider()).initialize()
        await DatabaseInitializer(store).initialize()
        assert await repos.languages.count() == 1


class TestClearAndReset:

    async def test_clear_empties_all_partitions(self, initializer, repos):
        await initializer.initialize()
        await initializer.clear()
        assert await _counts(repos) == (0, 0, 0, 0, 0)

    async def test_clear_on_fresh_store_is_harmless(self, initializer, repos):
        await initializer.clear()
        assert await repos.languages.count() == 0

    async def test_reset_reseeds_exactly_one_fixture(self, initializer, repos):
        await initializer.initialize()
        seeded = await _counts(repos)
        await initializer.reset()
        assert await _counts(repos) == seeded

    async def test_reset_removes_user_records(self, initializer, repos):
        from syntaxdb.store.models import FunctionDefinition
        await initializer.initialize()
        await repos.functions.create(FunctionDefinition(name="my_fn", display_name="Mine"))
        await initializer.reset()
        assert await repos.functions.get_by_name("my_fn") is None
