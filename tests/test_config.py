import json

import pytest

from material_engine.config import ENV_OVERRIDES, EngineConfig, load_config
from material_engine.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in list(ENV_OVERRIDES.values()) + ["GEMINI_API_KEY", "API_KEY"]:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_settings_file(tmp_path):
    config = load_config(str(tmp_path / "missing.json"))
    assert config == EngineConfig()


def test_settings_file_then_environment(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"fast_model": "gemini-2.0-flash", "request_timeout": "30", "api_base": "https://x/v1/", "extra": 1}),
        encoding="utf-8",
    )
    monkeypatch.setenv("MATERIAL_ENGINE_TIMEOUT", "45")
    monkeypatch.setenv("API_KEY", "from-api-key")

    config = load_config(str(path))

    assert config.fast_model == "gemini-2.0-flash"
    assert config.request_timeout == 45.0
    assert config.api_base == "https://x/v1"
    assert config.api_key == "from-api-key"


def test_gemini_key_wins(tmp_path, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "primary")
    monkeypatch.setenv("API_KEY", "secondary")
    assert load_config(str(tmp_path / "none.json")).api_key == "primary"


def test_unreadable_settings_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_settings_file_must_be_object(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_bad_env_value(tmp_path, monkeypatch):
    monkeypatch.setenv("MATERIAL_ENGINE_THINKING_BUDGET", "lots")
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "none.json"))


def test_to_dict_masks_key():
    assert EngineConfig(api_key="secret").to_dict()["api_key"] == "***"
    assert EngineConfig().to_dict()["api_key"] == ""
