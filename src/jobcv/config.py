"""Application configuration loaded from config.yaml and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

from jobcv.errors import ConfigurationError


@dataclass(frozen=True)
class OllamaConfig:
    api_url: str = "http://localhost:11434/api/chat"
    model: str = "mistral"
    timeout: float = 180.0  # seconds
    temperature: float = 0.3
    num_ctx: int = 1024
    num_gpu: int = 0
    max_attempts: int = 3
    retry_delay: float = 5.0


@dataclass(frozen=True)
class JoobleConfig:
    api_url: str = "https://pl.jooble.org/api"
    api_key: str | None = None
    timeout: float = 15.0
    radius: str = "40"
    page: str = "1"
    search_mode: str = "1"
    results_per_page: str = "10"


@dataclass(frozen=True)
class OutputConfig:
    cv_dir: str = "public/cvs"
    templates_path: str = "data/custom_templates.json"

    @property
    def resolved_cv_dir(self) -> Path:
        return Path(self.cv_dir).expanduser()

    @property
    def resolved_templates_path(self) -> Path:
        return Path(self.templates_path).expanduser()


@dataclass(frozen=True)
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 3000
    environment: str = "production"

    @property
    def debug(self) -> bool:
        return self.environment == "development"


@dataclass(frozen=True)
class AppConfig:
    ollama: OllamaConfig = field(default_factory=OllamaConfig)
    jooble: JoobleConfig = field(default_factory=JoobleConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def _env_number(name: str, cast, scale: float = 1.0):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return cast(float(raw) * scale) if scale != 1.0 else cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def apply_env_overrides(config: AppConfig) -> AppConfig:
    """Overlay environment variables on top of file/default settings."""
    ollama_changes: dict = {}
    if os.environ.get("OLLAMA_API_URL"):
        ollama_changes["api_url"] = os.environ["OLLAMA_API_URL"]
    if os.environ.get("OLLAMA_MODEL"):
        ollama_changes["model"] = os.environ["OLLAMA_MODEL"]
    # OLLAMA_TIMEOUT is expressed in milliseconds
    timeout = _env_number("OLLAMA_TIMEOUT", float, scale=0.001)
    if timeout is not None:
        ollama_changes["timeout"] = timeout

    jooble_changes: dict = {}
    if os.environ.get("JOOBLE_API_KEY"):
        jooble_changes["api_key"] = os.environ["JOOBLE_API_KEY"]

    output_changes: dict = {}
    if os.environ.get("JOBCV_OUTPUT_DIR"):
        output_changes["cv_dir"] = os.environ["JOBCV_OUTPUT_DIR"]

    server_changes: dict = {}
    port = _env_number("PORT", int)
    if port is not None:
        server_changes["port"] = port
    if os.environ.get("JOBCV_ENV"):
        server_changes["environment"] = os.environ["JOBCV_ENV"]

    return AppConfig(
        ollama=replace(config.ollama, **ollama_changes),
        jooble=replace(config.jooble, **jooble_changes),
        output=replace(config.output, **output_changes),
        server=replace(config.server, **server_changes),
    )


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults, then apply env."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Invalid config file {path}: expected a mapping")

    try:
        config = AppConfig(
            ollama=OllamaConfig(**raw.get("ollama", {})),
            jooble=JoobleConfig(**raw.get("jooble", {})),
            output=OutputConfig(**raw.get("output", {})),
            server=ServerConfig(**raw.get("server", {})),
        )
    except TypeError as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e
    return apply_env_overrides(config)
