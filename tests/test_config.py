"""Tests for settings resolution."""

from __future__ import annotations

import pytest  # type: ignore

from recruiteros.config import Settings, load_settings


def test_defaults_without_environment() -> None:
    settings = load_settings(env={})
    assert settings == Settings()
    assert settings.gemini_model == "gemini-2.5-flash"
    assert settings.context_max_records == 100


def test_environment_values() -> None:
    settings = load_settings(
        env={
            "LLM_PROVIDER": "gemini",
            "GOOGLE_API_KEY": "g-key",
            "RECRUITEROS_BLIND_MODE": "yes",
            "RECRUITEROS_CONTEXT_MAX_RECORDS": "25",
        }
    )
    assert settings.provider == "gemini"
    assert settings.gemini_api_key == "g-key"
    assert settings.blind_mode is True
    assert settings.context_max_records == 25


def test_gemini_key_takes_precedence_over_google_key() -> None:
    settings = load_settings(env={"GEMINI_API_KEY": "first", "GOOGLE_API_KEY": "second"})
    assert settings.gemini_api_key == "first"


def test_yaml_file_is_overridden_by_environment(tmp_path) -> None:
    config = tmp_path / "recruiteros.yaml"
    config.write_text("provider: openai\nopenai_model: gpt-test\nblind_mode: true\nunknown: 1\n", encoding="utf-8")
    settings = load_settings(str(config), env={"LLM_PROVIDER": "placeholder"})
    assert settings.provider == "placeholder"
    assert settings.openai_model == "gpt-test"
    assert settings.blind_mode is True


def test_unbounded_context() -> None:
    assert load_settings(env={"RECRUITEROS_CONTEXT_MAX_RECORDS": "none"}).context_max_records is None


def test_config_must_be_a_mapping(tmp_path) -> None:
    config = tmp_path / "bad.yaml"
    config.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(str(config), env={})


def test_missing_config_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(str(tmp_path / "absent.yaml"), env={})


def test_zero_context_records_is_not_unbounded() -> None:
    assert load_settings(env={"RECRUITEROS_CONTEXT_MAX_RECORDS": "0"}).context_max_records == 0


def test_negative_context_records_rejected() -> None:
    with pytest.raises(ValueError):
        load_settings(env={"RECRUITEROS_CONTEXT_MAX_RECORDS": "-5"})
