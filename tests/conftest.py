"""Shared test fixtures and configuration."""

from pathlib import Path
import sys

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from embedded_search.config import get_settings
from embedded_search.document_index import DocumentIndex
from embedded_search.observability import reset_tracer


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate tests from EMBEDDED_SEARCH_* variables and any local .env file."""
    import os

    for key in list(os.environ):
        if key.upper().startswith("EMBEDDED_SEARCH_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def isolated_tracer():
    """Start and end every test with no cached tracer so span tests can inject their own."""
    reset_tracer()
    yield
    reset_tracer()


@pytest.fixture
def lorem_index():
    """Two-document index over a single ``content`` field."""
    index = DocumentIndex()
    index.add_field("content")
    index.add("1", {"content": "Lorem ipsum dolor"})
    index.add("2", {"content": "Lorem ipsum"})
    return index


@pytest.fixture
def prefix_index():
    """Index whose vocabulary shares prefixes: ab, abc, abcde, de."""
    index = DocumentIndex()
    index.add_field("content")
    index.add("1", {"content": "abc abcde"})
    index.add("2", {"content": "ab de"})
    return index
