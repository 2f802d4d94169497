"""Shared fixtures."""

import pytest

from roigen.config.settings import Settings, reset_settings, set_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path):
    """Every test gets fresh settings with no API key and tmp_path as output."""
    settings = Settings(output_dir=tmp_path, log_level="DEBUG", api_key="")
    set_settings(settings)
    yield settings
    reset_settings()


@pytest.fixture
def demo_measures():
    return [{"Name": "Load", "Start": "L-Start", "Stop": "L-End"}]
