"""Shared pytest configuration, marker assignment and browser probing."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

ENGINE_PATH_ENV = "HDR_TO_ENV_ENGINE_PATH"


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        parts = set(Path(str(item.fspath)).parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


@pytest.fixture(scope="session")
def chromium_available() -> None:
    """Skip unless Playwright can launch a headless Chromium."""
    sync_api = pytest.importorskip("playwright.sync_api")
    try:
        with sync_api.sync_playwright() as playwright:
            browser = playwright.chromium.launch()
            browser.close()
    except Exception as exc:
        pytest.skip(f"headless Chromium unavailable: {exc}")


@pytest.fixture(scope="session")
def local_engine_path() -> Path | None:
    """Local Babylon.js bundle from ``HDR_TO_ENV_ENGINE_PATH``, if configured."""
    raw = os.environ.get(ENGINE_PATH_ENV)
    if not raw:
        return None
    path = Path(raw)
    return path if path.is_file() else None
