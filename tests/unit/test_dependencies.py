# tests/unit/test_dependencies.py
"""
Unit tests for collaborator construction from settings.
"""

import pytest

from brandswap import dependencies
from brandswap.config import Settings
from brandswap.llm.base import RefinementConfigError
from brandswap.records import factory
from brandswap.records.contentstack_store import ContentstackRecordStore
from brandswap.records.memory_store import InMemoryRecordStore


@pytest.fixture(autouse=True)
def reset_singletons():
    factory.reset_record_store()
    dependencies.reset_services()
    yield
    factory.reset_record_store()
    dependencies.reset_services()


class TestRecordStoreFactory:
    def test_memory_store(self):
        store = factory.get_record_store(Settings(_env_file=None, RECORD_STORE_PROVIDER="memory"))
        assert isinstance(store, InMemoryRecordStore)
        assert factory.get_record_store() is store

    def test_contentstack_store(self):
        settings = Settings(
            _env_file=None,
            RECORD_STORE_PROVIDER="contentstack",
            CONTENTSTACK_API_KEY="key",
            CONTENTSTACK_MANAGEMENT_TOKEN="token",
        )
        assert isinstance(factory.get_record_store(settings), ContentstackRecordStore)

    def test_unknown_store(self):
        with pytest.raises(ValueError):
            factory.get_record_store(Settings(_env_file=None, RECORD_STORE_PROVIDER="mongo"))

    def test_set_record_store(self):
        store = InMemoryRecordStore()
        factory.set_record_store(store)
        assert factory.get_record_store() is store


class TestServiceDependencies:
    def test_brandkit_service_singleton(self):
        settings = Settings(_env_file=None, BRANDKIT_RULES_PATH="rules.json")
        first = dependencies.get_brandkit_service(settings)
        assert dependencies.get_brandkit_service(settings) is first
        assert str(first.rules_path) == "rules.json"

    def test_missing_refinement_key_fails(self):
        settings = Settings(_env_file=None, REFINEMENT_PROVIDER="openai", OPENAI_API_KEY=None)
        with pytest.raises(RefinementConfigError):
            dependencies.get_refinement_adapter(settings)

    def test_openai_adapter(self):
        settings = Settings(_env_file=None, REFINEMENT_PROVIDER="openai", OPENAI_API_KEY="sk-test")
        adapter = dependencies.get_refinement_adapter(settings)
        assert adapter.provider.name == "openai"
        assert adapter.max_concurrency == settings.REFINEMENT_MAX_CONCURRENCY

    @pytest.mark.asyncio
    async def test_close_services_resets(self):
        dependencies.get_brandkit_service(Settings(_env_file=None))
        factory.set_record_store(InMemoryRecordStore())

        await dependencies.close_services()

        assert dependencies._brandkit_service is None
        assert factory._record_store is None
