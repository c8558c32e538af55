"""Application settings loaded from YAML with environment variable overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

ENV_PREFIX = "MANUAL_RAG_"

# ---------------------------------------------------------------------------
# Settings sections
# ---------------------------------------------------------------------------


class LLMSettings(BaseModel):
    provider: str = "gemini"
    model: str = "gemini-2.0-flash"
    temperature: float = 0.2
    max_tokens: int = 2048
    timeout_seconds: float = 60.0


class ChunkingSettings(BaseModel):
    max_size: int = 2000
    overlap: int = 200
    index_max_size: int = 500
    index_overlap: int = 0
    min_index_length: int = 50


class BatchSettings(BaseModel):
    batch_size: int = 2
    max_retries: int = 3
    retry_delay_ms: int = 2000
    pacing_delay_ms: int = 5000
    deadline_seconds: float | None = 900.0


class RetrievalSettings(BaseModel):
    top_k: int = 5


class IngestionSettings(BaseModel):
    supported_formats: list[str] = Field(default_factory=lambda: [".pdf", ".txt"])
    max_file_size_mb: int = 50


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    llm: LLMSettings = Field(default_factory=LLMSettings)
    chunking: ChunkingSettings = Field(default_factory=ChunkingSettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)


def _find_settings_file() -> Path | None:
    """Walk up from cwd looking for settings.yaml."""
    profile = os.getenv(f"{ENV_PREFIX}PROFILE", "")
    names = [f"settings-{profile}.yaml", "settings.yaml"] if profile else ["settings.yaml"]

    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        for name in names:
            candidate = parent / name
            if candidate.exists():
                return candidate
    return None


def _env_overrides(environ: dict[str, str] | None = None) -> dict[str, dict[str, Any]]:
    """Collect ``MANUAL_RAG_<SECTION>__<FIELD>`` variables into nested dicts.

    Values stay strings; pydantic coerces them to the field types.
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, dict[str, Any]] = {}
    for key, value in env.items():
        if not key.startswith(ENV_PREFIX) or "__" not in key:
            continue
        section, _, field_name = key[len(ENV_PREFIX):].lower().partition("__")
        if section in Settings.model_fields and field_name:
            overrides.setdefault(section, {})[field_name] = value
    return overrides


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """Load settings from YAML file, then apply environment overrides."""
    raw: dict[str, Any] = {}
    path = _find_settings_file()
    if path is not None:
        with open(path, encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}

    for section, values in _env_overrides(environ).items():
        raw.setdefault(section, {}).update(values)

    return Settings(**raw)
