"""Pytest configuration shared by the whole suite."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from sitemanager.settings import get_settings


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Rebuild settings per test so ``monkeypatch.setenv`` changes take effect."""

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
