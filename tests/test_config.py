"""Tests for settings loading — defaults, YAML file, profiles, env overrides."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from manual_rag.config import Settings, _env_overrides, load_settings


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch) -> Path:
    """Run from an empty directory so no settings file is picked up."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MANUAL_RAG_PROFILE", raising=False)
    return tmp_path


class TestDefaults:
    def test_policy_defaults(self, isolated_cwd):
        settings = load_settings(environ={})
        assert settings.chunking.max_size == 2000
        assert settings.chunking.overlap == 200
        assert settings.chunking.min_index_length == 50
        assert settings.batch.batch_size == 2
        assert settings.batch.max_retries == 3
        assert settings.batch.retry_delay_ms == 2000
        assert settings.batch.pacing_delay_ms == 5000
        assert settings.batch.deadline_seconds == 900
        assert settings.retrieval.top_k == 5
        assert settings.llm.provider == "gemini"

    def test_supported_formats(self):
        assert Settings().ingestion.supported_formats == [".pdf", ".txt"]


class TestSettingsFile:
    def test_yaml_file(self, isolated_cwd):
        (isolated_cwd / "settings.yaml").write_text(
            "llm:\n  provider: ollama\n  model: mistral\nbatch:\n  batch_size: 4\n"
        )
        settings = load_settings(environ={})
        assert settings.llm.provider == "ollama"
        assert settings.llm.model == "mistral"
        assert settings.batch.batch_size == 4
        assert settings.batch.max_retries == 3

    def test_found_in_parent_directory(self, isolated_cwd, monkeypatch):
        (isolated_cwd / "settings.yaml").write_text("retrieval:\n  top_k: 9\n")
        child = isolated_cwd / "sub" / "dir"
        child.mkdir(parents=True)
        monkeypatch.chdir(child)
        assert load_settings(environ={}).retrieval.top_k == 9

    def test_profile_file_wins(self, isolated_cwd, monkeypatch):
        (isolated_cwd / "settings.yaml").write_text("retrieval:\n  top_k: 9\n")
        (isolated_cwd / "settings-local.yaml").write_text("retrieval:\n  top_k: 2\n")
        monkeypatch.setenv("MANUAL_RAG_PROFILE", "local")
        assert load_settings(environ={}).retrieval.top_k == 2

    def test_empty_file(self, isolated_cwd):
        (isolated_cwd / "settings.yaml").write_text("")
        assert load_settings(environ={}).retrieval.top_k == 5


class TestEnvOverrides:
    def test_collects_sections(self):
        overrides = _env_overrides({
            "MANUAL_RAG_BATCH__BATCH_SIZE": "4",
            "MANUAL_RAG_LLM__PROVIDER": "ollama",
            "MANUAL_RAG_PROFILE": "dev",
            "MANUAL_RAG_UNKNOWN__FIELD": "x",
            "PATH": "/usr/bin",
        })
        assert overrides == {
            "batch": {"batch_size": "4"},
            "llm": {"provider": "ollama"},
        }

    def test_env_beats_file(self, isolated_cwd):
        (isolated_cwd / "settings.yaml").write_text("batch:\n  batch_size: 4\n  max_retries: 5\n")
        settings = load_settings(environ={"MANUAL_RAG_BATCH__BATCH_SIZE": "1"})
        assert settings.batch.batch_size == 1
        assert settings.batch.max_retries == 5

    def test_values_coerced(self, isolated_cwd):
        settings = load_settings(environ={"MANUAL_RAG_BATCH__DEADLINE_SECONDS": "60.5"})
        assert settings.batch.deadline_seconds == 60.5

    def test_invalid_value(self, isolated_cwd):
        with pytest.raises(ValidationError):
            load_settings(environ={"MANUAL_RAG_BATCH__BATCH_SIZE": "many"})
