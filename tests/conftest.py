# tests/conftest.py
"""
Pytest configuration and fixtures.
"""

import json
import os
from typing import Optional

import pytest

# Set test environment before any brandswap import reads settings
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RECORD_STORE_PROVIDER", "memory")
os.environ.setdefault("GEMINI_API_KEY", "test-key")
os.environ.setdefault("LOG_FORMAT", "text")

from brandswap.llm.base import RefinementProvider, RefinementServiceError  # noqa: E402
from brandswap.records.memory_store import InMemoryRecordStore  # noqa: E402
from brandswap.services.brandkit_service import BrandkitService  # noqa: E402
from brandswap.services.policy import PolicyRuleset  # noqa: E402


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "llm: tests requiring LLM API calls (deselect with '-m \"not llm\"')")


class FakeRefinementProvider(RefinementProvider):
    """
    Scripted refinement provider.

    ``responses`` is either a fixed string, a callable taking the document
    text, or an exception instance to raise.
    """

    def __init__(self, responses=None):
        self.responses = responses
        self.calls: list[tuple[str, str, str]] = []
        self.closed = False

    @property
    def name(self) -> str:
        return "fake"

    @property
    def model_name(self) -> str:
        return "fake-model"

    async def refine_text(self, document_text: str, original_term: str, new_term: str) -> Optional[str]:
        self.calls.append((document_text, original_term, new_term))
        if isinstance(self.responses, Exception):
            raise self.responses
        if callable(self.responses):
            return self.responses(document_text)
        if self.responses is None:
            # Echo the document back unchanged
            return document_text
        return self.responses

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def provider_factory():
    """Build scripted providers: provider_factory(responses)."""
    return FakeRefinementProvider


@pytest.fixture
def fake_provider():
    return FakeRefinementProvider()


@pytest.fixture
def failing_provider():
    return FakeRefinementProvider(RefinementServiceError("service unavailable"))


@pytest.fixture
def ruleset():
    """Ruleset with one approved term and one banned term."""
    return PolicyRuleset.from_dict(
        {
            "approvedTerms": [{"term": "contentstack", "replaceWith": "Contentstack"}],
            "bannedTerms": ["Foo"],
        }
    )


@pytest.fixture
def rules_file(tmp_path):
    path = tmp_path / "brandkit.json"
    path.write_text(
        json.dumps(
            {
                "approvedTerms": [{"term": "contentstack", "replaceWith": "Contentstack"}],
                "bannedTerms": ["Foo"],
            }
        )
    )
    return path


@pytest.fixture
def brandkit(rules_file):
    """Brandkit service reading rules from a local file only."""
    return BrandkitService(rules_path=rules_file)


@pytest.fixture
def blog_entries():
    return [
        {
            "uid": "blt001",
            "title": "Climbing Everest",
            "updated_at": "2024-05-01T10:00:00.000Z",
            "created_at": "2024-04-01T10:00:00.000Z",
            "body": "We climbed Everest. Everest is tall.",
            "seo": {"meta_title": "Everest guide", "keywords": ["everest", "alps"]},
            "views": 120,
        },
        {
            "uid": "blt002",
            "title": "Packing list",
            "updated_at": "2024-05-02T10:00:00.000Z",
            "created_at": "2024-04-02T10:00:00.000Z",
            "body": "Bring water.",
            "seo": {"meta_title": "Packing", "keywords": []},
            "views": 12,
        },
    ]


@pytest.fixture
def memory_store(blog_entries):
    return InMemoryRecordStore(
        content_types={
            "blog_post": {
                "title": "Blog Post",
                "description": "Articles for the blog",
                "entries": blog_entries,
            }
        }
    )
