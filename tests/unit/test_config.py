"""
Tests unitaires du chargement de configuration.
"""
from unittest.mock import MagicMock

import pytest

from pollinations_relay.config import loader
from pollinations_relay.config.loader import load_config, reload_config, get_config
from pollinations_relay.config.settings import Settings
from pollinations_relay.core.exceptions import ConfigurationError
from pollinations_relay.main import create_app


@pytest.fixture(autouse=True)
def clear_cache():
    loader._clear_config_cache()
    yield
    loader._clear_config_cache()


def _write(tmp_path, content: str):
    path = tmp_path / "config.toml"
    path.write_text(content, encoding="utf-8")
    return path


def test_load_config_expands_env_vars(tmp_path, monkeypatch):
    monkeypatch.setenv("RELAY_UPSTREAM", "https://proxy.example.com/")
    path = _write(tmp_path, '[upstream]\nurl = "${RELAY_UPSTREAM}"\nother = "${ABSENT_VAR_XYZ}"\n')

    config = load_config(str(path))

    assert config["upstream"]["url"] == "https://proxy.example.com/"
    assert config["upstream"]["other"] == "${ABSENT_VAR_XYZ}"


def test_config_is_cached(tmp_path):
    path = _write(tmp_path, '[upstream]\ndefault_model = "openai"\n')
    first = load_config(str(path))
    assert get_config() is first


def test_create_app_uses_cached_config(tmp_path):
    path = _write(tmp_path, '[upstream]\ndefault_model = "openai"\n')
    load_config(str(path))

    app = create_app(upstream_client=MagicMock(), preprocessor=MagicMock())

    assert app.state.settings.upstream.default_model == "openai"


def test_reload_config(tmp_path):
    path = _write(tmp_path, '[upstream]\ndefault_model = "openai"\n')
    load_config(str(path))
    path.write_text('[upstream]\ndefault_model = "mistral"\n', encoding="utf-8")

    assert reload_config(str(path))["upstream"]["default_model"] == "mistral"


def test_env_var_config_path(tmp_path, monkeypatch):
    path = _write(tmp_path, '[server]\nport = 9000\n')
    monkeypatch.setenv("POLLINATIONS_RELAY_CONFIG", str(path))

    assert load_config()["server"]["port"] == 9000


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(str(tmp_path / "absent.toml"))
    settings = Settings.from_config(config)

    assert config == {}
    assert settings.upstream.url == "https://text.pollinations.ai/"
    assert settings.upstream.default_model == "mistral"
    assert settings.media.model == "openai"
    assert settings.media.max_width == 768


def test_invalid_toml_raises(tmp_path):
    path = _write(tmp_path, "[upstream\nurl = ")
    with pytest.raises(ConfigurationError):
        load_config(str(path))


def test_settings_from_config():
    settings = Settings.from_config({
        "upstream": {"url": "http://localhost:9999/", "default_model": "openai"},
        "media": {"max_width": 512, "max_height": 256, "frame_interval": 2},
        "server": {"port": 8080},
        "logging": {"level": "debug"},
    })

    assert settings.upstream.url == "http://localhost:9999/"
    assert settings.media.max_width == 512
    assert settings.media.frame_interval == 2.0
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("config", [
    {"upstream": {"url": "ftp://nope"}},
    {"media": {"max_width": 0}},
    {"media": {"frame_interval": -1}},
])
def test_settings_validation(config):
    with pytest.raises(ConfigurationError):
        Settings.from_config(config)
