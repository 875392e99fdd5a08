"""Shared fixtures: every test starts from default settings."""

import pytest

from rtguard import config


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Clear rtguard environment overrides and the settings cache."""
    for name in ("RTGUARD_ENABLED", "RTGUARD_CHECK_RETURNS",
                 "RTGUARD_REPR_LIMIT", config.RTGUARD_CONFIG):
        monkeypatch.delenv(name, raising=False)
    # Keep the user's own ~/.config/rtguard out of the picture
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    config.clear_cache()
    yield
    config.clear_cache()
