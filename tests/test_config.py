"""Tests for environment-driven editor configuration."""

from pathlib import Path

from tritan.config import DEFAULT_API_URL, DEFAULT_STORAGE_KEY, EditorConfig


def test_defaults(monkeypatch):
    for name in EditorConfig._ENV_MAP.values():
        monkeypatch.delenv(name, raising=False)
    config = EditorConfig.get_default_instance()
    assert config.api_url == DEFAULT_API_URL == "http://localhost:8000"
    assert config.storage_key == DEFAULT_STORAGE_KEY == "tritan-workflow-storage"
    assert config.request_timeout == 30.0


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("TRITAN_API_URL", "https://engine.example.com")
    monkeypatch.setenv("TRITAN_REQUEST_TIMEOUT", "7.5")
    monkeypatch.setenv("TRITAN_STORAGE_DIR", str(tmp_path))
    config = EditorConfig.get_default_instance()
    assert config.api_url == "https://engine.example.com"
    assert config.request_timeout == 7.5
    assert config.storage_path == Path(tmp_path)


def test_invalid_number_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("TRITAN_REQUEST_TIMEOUT", "soon")
    assert EditorConfig.get_default_instance().request_timeout == 30.0
