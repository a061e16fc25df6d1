from __future__ import annotations

from pathlib import Path

import pytest

from mtsp_ga.config.settings import (
    Settings,
    get_settings,
    load_env_file,
    reset_settings_cache,
)


def teardown_module() -> None:  # pragma: no cover - test helper
    reset_settings_cache()


def test_load_env_file_parses_key_value(tmp_path: Path) -> None:
    env_path = tmp_path / "custom.env"
    env_path.write_text(
        """
        # comment
        MTSP_GA_ENVIRONMENT=production
        MTSP_GA_RANDOM_SEED=101
        INVALID_LINE
        """.strip(),
        encoding="utf-8",
    )

    data = load_env_file(env_path)
    assert data["MTSP_GA_ENVIRONMENT"] == "production"
    assert data["MTSP_GA_RANDOM_SEED"] == "101"
    assert "INVALID_LINE" not in data
    assert load_env_file(tmp_path / "missing.env") == {}


def test_settings_from_env_uses_project_root_and_env_file(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "MTSP_GA_RANDOM_SEED=123\nMTSP_GA_STRUCTURED_LOGGING=false\n",
        encoding="utf-8",
    )

    settings = Settings.from_env(overrides={"project_root": tmp_path}, environ={})

    assert settings.project_root == tmp_path.resolve()
    assert settings.random_seed == 123
    assert settings.configs_dir == tmp_path.resolve() / "configs"
    assert settings.outputs_dir == tmp_path.resolve() / "outputs"
    assert settings.logs_dir == tmp_path.resolve() / "logs"
    assert settings.environment == "development"
    assert not settings.structured_logging


def test_settings_from_env_overrides_and_env_variables(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("MTSP_GA_OUTPUTS_DIR", "env_outputs")
    monkeypatch.setenv("MTSP_GA_STRUCTURED_LOGGING", "1")
    monkeypatch.setenv("MTSP_GA_ENVIRONMENT", "production")

    settings = Settings.from_env(
        overrides={
            "project_root": tmp_path,
            "LOGS_DIR": "logs_alt",
            "STRUCTURED_LOGGING": "false",
        }
    )

    root = tmp_path.resolve()
    assert settings.outputs_dir == root / "env_outputs"
    assert settings.logs_dir == root / "logs_alt"
    # Overrides take precedence over environment variables.
    assert not settings.structured_logging
    assert settings.environment == "production"


def test_settings_rejects_unparseable_boolean(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        Settings.from_env(
            overrides={"project_root": tmp_path},
            environ={"MTSP_GA_STRUCTURED_LOGGING": "maybe"},
        )


def test_settings_unknown_override_raises(tmp_path: Path) -> None:
    with pytest.raises(KeyError):
        Settings.from_env(overrides={"project_root": tmp_path, "UNKNOWN": 10})


def test_settings_to_dict_is_json_ready(tmp_path: Path) -> None:
    settings = Settings.from_env(overrides={"project_root": tmp_path}, environ={})
    payload = settings.to_dict()

    assert payload["project_root"] == str(tmp_path.resolve())
    assert payload["random_seed"] == 42
    assert all(isinstance(value, (str, int, bool)) for value in payload.values())


def test_get_settings_caches_until_reset(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("MTSP_GA_PROJECT_ROOT", str(tmp_path))
    reset_settings_cache()

    first = get_settings()
    assert get_settings() is first
    assert get_settings(overrides={"RANDOM_SEED": 7}).random_seed == 7

    reset_settings_cache()
    assert get_settings() is not first


def test_explicit_env_file_loses_to_environment(tmp_path: Path) -> None:
    env_path = tmp_path / "run.env"
    env_path.write_text(
        "MTSP_GA_RANDOM_SEED=5\nMTSP_GA_OUTPUTS_DIR=/tmp/explicit_outputs\n", encoding="utf-8"
    )
    (tmp_path / ".env").write_text("MTSP_GA_RANDOM_SEED=99\n", encoding="utf-8")

    settings = Settings.from_env(
        overrides={"project_root": tmp_path},
        env_file=env_path,
        environ={"MTSP_GA_RANDOM_SEED": "6"},
    )

    assert settings.random_seed == 6
    assert settings.outputs_dir == Path("/tmp/explicit_outputs")
