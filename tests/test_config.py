"""
Tests for RemixConfig loading, environment overrides and round-trips.
"""

import json
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from remix.core.config import (
    IgnoreConfig,
    LoggingConfig,
    OutputConfig,
    ProcessingConfig,
    RemixConfig,
    SecurityConfig,
    find_config,
    load_config,
)
from remix.core.errors import ConfigError

ignore_pattern = st.from_regex(r"[a-zA-Z0-9_\-\*\./]+", fullmatch=True)


@st.composite
def remix_config_strategy(draw):
    """Generate valid RemixConfig instances."""
    return RemixConfig(
        include=draw(st.lists(ignore_pattern, max_size=5)),
        max_file_size=draw(st.integers(min_value=1, max_value=10_000_000)),
        compress=draw(st.booleans()),
        instruction=draw(st.none() | st.text(st.characters(whitelist_categories=("L", "N")), max_size=30)),
        ignore=IgnoreConfig(
            use_version_control_ignore=draw(st.booleans()),
            use_default_patterns=draw(st.booleans()),
            use_local_ignore_file=draw(st.booleans()),
            custom_patterns=draw(st.lists(ignore_pattern, max_size=5)),
        ),
        security=SecurityConfig(enable_security_check=draw(st.booleans())),
        output=OutputConfig(remove_comments=draw(st.booleans())),
        processing=ProcessingConfig(max_workers=draw(st.integers(min_value=1, max_value=64))),
        logging=LoggingConfig(level=draw(st.sampled_from(["DEBUG", "INFO", "WARNING", "ERROR"]))),
    )


class TestDefaults:
    def test_bundled_defaults(self):
        config = RemixConfig()

        assert config.include == []
        assert config.max_file_size == 100_000
        assert config.compress is False
        assert config.instruction is None
        assert config.ignore.use_version_control_ignore is True
        assert config.ignore.use_default_patterns is True
        assert config.ignore.use_local_ignore_file is True
        assert config.ignore.custom_patterns == []
        assert config.security.enable_security_check is True
        assert config.output.remove_comments is False
        assert config.processing.max_workers == 8

    def test_list_defaults_are_not_shared(self):
        first = RemixConfig()
        first.include.append("**/*.rs")

        assert RemixConfig().include == []


class TestFromFile:
    def test_yaml(self, tmp_path):
        path = tmp_path / "remix.config.yaml"
        path.write_text(
            "include:\n  - '**/*.rs'\nmax_file_size: 5000\nignore:\n  custom_patterns: ['docs/']\n",
            encoding="utf-8",
        )

        config = RemixConfig.from_file(path)

        assert config.include == ["**/*.rs"]
        assert config.max_file_size == 5000
        assert config.ignore.custom_patterns == ["docs/"]
        assert config.ignore.use_default_patterns is True

    def test_json(self, tmp_path):
        path = tmp_path / "remix.config.json"
        path.write_text(json.dumps({"compress": True, "security": {"enable_security_check": False}}))

        config = RemixConfig.from_file(path)

        assert config.compress is True
        assert config.security.enable_security_check is False

    def test_unknown_key_rejected(self, tmp_path):
        path = tmp_path / "remix.config.json"
        path.write_text(json.dumps({"unknown": 1}))

        with pytest.raises(ConfigError, match="Unknown configuration key"):
            RemixConfig.from_file(path)

    def test_unknown_section_field_rejected(self, tmp_path):
        path = tmp_path / "remix.config.yaml"
        path.write_text("ignore:\n  use_everything: true\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="ignore"):
            RemixConfig.from_file(path)

    def test_string_include_rejected(self, tmp_path):
        path = tmp_path / "remix.config.yaml"
        path.write_text('include: "**/*.rs"\n', encoding="utf-8")

        with pytest.raises(ConfigError, match="include"):
            RemixConfig.from_file(path)

    def test_string_custom_patterns_rejected(self, tmp_path):
        path = tmp_path / "remix.config.json"
        path.write_text(json.dumps({"ignore": {"custom_patterns": "*.log"}}))

        with pytest.raises(ConfigError, match="ignore.custom_patterns"):
            RemixConfig.from_file(path)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "remix.config.yaml"
        path.write_text("include: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            RemixConfig.from_file(path)

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "remix.toml"
        path.write_text("x = 1\n")

        with pytest.raises(ConfigError, match="Unsupported"):
            RemixConfig.from_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RemixConfig.from_file(tmp_path / "nope.yaml")

    def test_find_config_prefers_json(self, tmp_path):
        assert find_config(tmp_path) is None

        (tmp_path / "remix.config.yaml").write_text("compress: true\n")
        assert find_config(tmp_path) == tmp_path / "remix.config.yaml"

        (tmp_path / "remix.config.json").write_text("{}")
        assert find_config(tmp_path) == tmp_path / "remix.config.json"


class TestEnvOverrides:
    def test_overrides_applied(self, monkeypatch):
        monkeypatch.setenv("REMIX_INCLUDE", "**/*.rs, **/*.toml")
        monkeypatch.setenv("REMIX_MAX_FILE_SIZE", "1234")
        monkeypatch.setenv("REMIX_COMPRESS", "yes")
        monkeypatch.setenv("REMIX_IGNORE_USE_VERSION_CONTROL_IGNORE", "false")
        monkeypatch.setenv("REMIX_PROCESSING_MAX_WORKERS", "2")
        monkeypatch.setenv("REMIX_LOGGING_LEVEL", "DEBUG")

        config = load_config()

        assert config.include == ["**/*.rs", "**/*.toml"]
        assert config.max_file_size == 1234
        assert config.compress is True
        assert config.ignore.use_version_control_ignore is False
        assert config.processing.max_workers == 2
        assert config.logging.level == "DEBUG"

    def test_invalid_number(self, monkeypatch):
        monkeypatch.setenv("REMIX_MAX_FILE_SIZE", "lots")

        with pytest.raises(ConfigError, match="REMIX_MAX_FILE_SIZE"):
            load_config()

    def test_env_can_be_skipped(self, monkeypatch):
        monkeypatch.setenv("REMIX_COMPRESS", "true")

        assert load_config(apply_env=False).compress is False


class TestLoggingConfig:
    def test_apply_configures_root_logger(self):
        with patch("logging.basicConfig") as basic_config:
            LoggingConfig(level="warning", format="%(message)s").apply()

        basic_config.assert_called_once_with(level="WARNING", format="%(message)s", force=True)


@given(config=remix_config_strategy())
@settings(max_examples=50, deadline=None)
def test_config_round_trip(config):
    """Saving and loading a configuration yields an equal configuration."""
    with tempfile.TemporaryDirectory() as tmpdir:
        for name in ("config.yaml", "config.json"):
            path = Path(tmpdir) / name
            config.save(path)
            assert RemixConfig.from_file(path) == config
