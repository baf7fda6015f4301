"""
Pytest config.

Tests import the local `pep/` package straight from the repo root; pin it on sys.path
so a global `pytest` entrypoint collects the same way as `python -m pytest`.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_repo_root_on_syspath() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


_ensure_repo_root_on_syspath()


TEST_TEMPLATE = (
    "<Request>"
    "<Subject>{{subjectId}}</Subject>"
    "<Resource>{{organization}}</Resource>"
    "<Action>{{action}}</Action>"
    "</Request>"
)


@pytest.fixture(autouse=True)
def _clear_access_config_cache(monkeypatch: pytest.MonkeyPatch):
    """
    `load_access_config` is lru_cached for the process; tests that change ACCESS_* env
    vars need a fresh read on both sides of the test.
    """
    from pep.access.config import load_access_config

    for name in (
        "ACCESS_PROTOCOL",
        "ACCESS_HOST",
        "ACCESS_PORT",
        "ACCESS_PATH",
        "ACCESS_TEMPLATE_PATH",
        "ACCESS_TIMEOUT_SECONDS",
        "ACCESS_TOKEN_HEADER",
        "ACCESS_ORGANIZATION_HEADER",
    ):
        monkeypatch.delenv(name, raising=False)
    load_access_config.cache_clear()
    yield
    load_access_config.cache_clear()


@pytest.fixture
def access_template():
    from pep.access.models import AccessTemplate

    return AccessTemplate(text=TEST_TEMPLATE, source="<test>")
