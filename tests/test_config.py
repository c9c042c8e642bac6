"""Tests for config loading."""

import pytest

from jobcv.config import AppConfig, OllamaConfig, OutputConfig, load_config
from jobcv.errors import ConfigurationError


class TestConfig:
    def test_defaults(self):
        config = AppConfig()
        assert config.ollama.api_url == "http://localhost:11434/api/chat"
        assert config.ollama.model == "mistral"
        assert config.ollama.max_attempts == 3
        assert config.jooble.api_key is None
        assert config.server.port == 3000
        assert config.server.debug is False

    def test_load_config_defaults(self, tmp_path):
        """Loading from non-existent path returns defaults."""
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config.ollama.timeout == 180.0

    def test_load_config_from_yaml(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            "ollama:\n  model: llama3\n  retry_delay: 1.5\nserver:\n  port: 8080\n"
        )
        config = load_config(yaml_path)
        assert config.ollama.model == "llama3"
        assert config.ollama.retry_delay == 1.5
        assert config.server.port == 8080
        # Defaults for unspecified
        assert config.jooble.results_per_page == "10"

    def test_unknown_key_raises(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("ollama:\n  modle: typo\n")
        with pytest.raises(ConfigurationError):
            load_config(yaml_path)

    def test_non_mapping_file_raises(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            load_config(yaml_path)

    def test_output_resolved_path(self):
        output = OutputConfig(cv_dir="~/cvs")
        assert "~" not in str(output.resolved_cv_dir)

    def test_frozen_config(self):
        config = OllamaConfig()
        with pytest.raises(AttributeError):
            config.model = "changed"


class TestEnvOverrides:
    def test_env_overrides_file(self, tmp_path, monkeypatch):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("ollama:\n  model: from-file\n")
        monkeypatch.setenv("OLLAMA_MODEL", "from-env")
        monkeypatch.setenv("OLLAMA_API_URL", "http://gpu-box:11434/api/chat")
        monkeypatch.setenv("JOOBLE_API_KEY", "k")
        monkeypatch.setenv("JOBCV_OUTPUT_DIR", str(tmp_path / "out"))

        config = load_config(yaml_path)

        assert config.ollama.model == "from-env"
        assert config.ollama.api_url == "http://gpu-box:11434/api/chat"
        assert config.jooble.api_key == "k"
        assert config.output.resolved_cv_dir == tmp_path / "out"

    def test_ollama_timeout_is_milliseconds(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OLLAMA_TIMEOUT", "120000")
        assert load_config(tmp_path / "none.yaml").ollama.timeout == pytest.approx(120.0)

    def test_port_and_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PORT", "4000")
        monkeypatch.setenv("JOBCV_ENV", "development")
        config = load_config(tmp_path / "none.yaml")
        assert config.server.port == 4000
        assert config.server.debug is True

    @pytest.mark.parametrize("name", ["PORT", "OLLAMA_TIMEOUT"])
    def test_invalid_number_raises(self, tmp_path, monkeypatch, name):
        monkeypatch.setenv(name, "soon")
        with pytest.raises(ConfigurationError, match=name):
            load_config(tmp_path / "none.yaml")

    def test_blank_values_are_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PORT", "")
        monkeypatch.setenv("OLLAMA_MODEL", "")
        config = load_config(tmp_path / "none.yaml")
        assert config.server.port == 3000
        assert config.ollama.model == "mistral"
