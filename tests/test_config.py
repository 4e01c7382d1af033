from __future__ import annotations

from pathlib import Path

import pytest

from starboard.config import Settings, load_settings, resolve_config_path


def test_defaults_apply_without_file_or_environment(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "missing.yaml", environ={})

    assert settings == Settings()
    assert settings.backend_url == "http://localhost:3001"
    assert settings.page_size == 6


def test_yaml_file_overrides_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "starboard.yaml"
    config_path.write_text(
        "backend_url: http://api.internal:3001\n"
        "collection_path: /hollywoodStars\n"
        "page_size: 2\n"
        "log_level: debug\n",
        encoding="utf-8",
    )

    settings = load_settings(config_path, environ={})

    assert settings.backend_url == "http://api.internal:3001"
    assert settings.collection_path == "/hollywoodStars"
    assert settings.page_size == 2
    assert settings.log_level == "DEBUG"


def test_environment_overrides_file(tmp_path: Path) -> None:
    config_path = tmp_path / "starboard.yaml"
    config_path.write_text("page_size: 2\ntimeout: 5\n", encoding="utf-8")

    settings = load_settings(
        config_path,
        environ={
            "STARBOARD_PAGE_SIZE": "12",
            "STARBOARD_SESSION_SECRET": "secret",
            "STARBOARD_BACKEND_URL": "",
        },
    )

    assert settings.page_size == 12
    assert settings.timeout == 5.0
    assert settings.session_secret == "secret"
    assert settings.backend_url == "http://localhost:3001"


def test_config_path_comes_from_environment(tmp_path: Path) -> None:
    config_path = tmp_path / "custom.yaml"
    config_path.write_text("page_size: 4\n", encoding="utf-8")

    settings = load_settings(environ={"STARBOARD_CONFIG": str(config_path)})

    assert settings.page_size == 4
    assert resolve_config_path(str(config_path)) == config_path.resolve()


@pytest.mark.parametrize(
    "content",
    [
        "page_size: 0\n",
        "page_size: many\n",
        "timeout: -1\n",
        "unknown_key: 1\n",
        "log_level: verbose\n",
        "- just\n- a list\n",
    ],
)
def test_invalid_configuration_is_rejected(tmp_path: Path, content: str) -> None:
    config_path = tmp_path / "starboard.yaml"
    config_path.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError):
        load_settings(config_path, environ={})


def test_log_level_from_environment_must_be_known(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        load_settings(tmp_path / "missing.yaml", environ={"STARBOARD_LOG_LEVEL": "verbose"})

    settings = load_settings(tmp_path / "missing.yaml", environ={"STARBOARD_LOG_LEVEL": "warning"})
    assert settings.log_level == "WARNING"
