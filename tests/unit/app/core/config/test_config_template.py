"""Unit tests for config_template module."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from book_catalog.runtime.config.config_data import ConfigData
from book_catalog.runtime.config.config_template import (
    apply_environment_overrides,
    load_config,
    load_templated_yaml,
    substitute_env_vars,
)

PROJECT_CONFIG = Path(__file__).parents[5] / "config.yaml"


class TestSubstituteEnvVars:
    """Test cases for substitute_env_vars function."""

    def test_substitute_simple_env_var(self):
        with patch.dict(os.environ, {"TEST_VAR": "test_value"}):
            assert substitute_env_vars("${TEST_VAR}") == "test_value"

    def test_substitute_env_var_in_text(self):
        with patch.dict(os.environ, {"HOST": "localhost", "PORT": "8080"}):
            result = substitute_env_vars("Server running at http://${HOST}:${PORT}/api")
            assert result == "Server running at http://localhost:8080/api"

    def test_default_when_unset(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("${MISSING_VAR:-default_value}") == "default_value"

    def test_default_when_empty(self):
        """An empty variable counts as unset for the default form."""
        with patch.dict(os.environ, {"EMPTY_VAR": ""}):
            assert substitute_env_vars("${EMPTY_VAR:-8080}") == "8080"

    def test_value_wins_over_default(self):
        with patch.dict(os.environ, {"PRESENT_VAR": "actual_value"}):
            assert substitute_env_vars("${PRESENT_VAR:-default_value}") == "actual_value"

    def test_empty_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("${MISSING_VAR:-}") == ""

    def test_required_var_missing(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(
                ValueError, match="Required environment variable MISSING_VAR not set"
            ):
                substitute_env_vars("${MISSING_VAR}")

    def test_custom_error(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(
                ValueError,
                match="Required environment variable MISSING_VAR: needed for the catalog",
            ):
                substitute_env_vars("${MISSING_VAR:?needed for the catalog}")

    def test_text_without_placeholders_is_unchanged(self):
        assert substitute_env_vars("plain: text") == "plain: text"


class TestApplyEnvironmentOverrides:
    def test_promotes_prefixed_variables(self):
        with patch.dict(
            os.environ,
            {"TEST_DATABASE_NAME": "bookdb_test", "DATABASE_NAME": "bookdb"},
            clear=True,
        ):
            applied = apply_environment_overrides("test")

            assert applied == ["DATABASE_NAME"]
            assert os.environ["DATABASE_NAME"] == "bookdb_test"

    def test_ignores_other_environments(self):
        with patch.dict(os.environ, {"PRODUCTION_DATABASE_NAME": "prod"}, clear=True):
            assert apply_environment_overrides("development") == []
            assert "DATABASE_NAME" not in os.environ


class TestLoadTemplatedYaml:
    """Test loading the project config.yaml with various environments."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = load_templated_yaml(PROJECT_CONFIG)

        assert config.app.environment == "development"
        assert config.app.port == 8080
        assert config.database.driver == "postgresql+psycopg2"
        assert config.database.host == "localhost"
        assert config.database.port is None
        assert config.database.name == "bookdb"
        assert config.database.user == "postgres"
        assert config.database.password is None
        assert config.database.skip_bootstrap is False
        assert config.logging.file is None

    def test_environment_values(self):
        env = {
            "DATABASE_DRIVER": "mysql+pymysql",
            "DATABASE_HOST": "db.internal",
            "DATABASE_PORT_NUMBER": "3306",
            "DATABASE_NAME": "catalog",
            "DATABASE_USER": "catalog",
            "DATABASE_PASSWORD": "s3cret",
            "SERVER_PORT": "9090",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_templated_yaml(PROJECT_CONFIG)

        assert config.database.driver == "mysql+pymysql"
        assert config.database.host == "db.internal"
        assert config.database.port == 3306
        assert config.database.name == "catalog"
        assert config.database.password == "s3cret"
        assert config.app.port == 9090

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("true", True), ("1", True), ("false", False), ("0", False), ("", False)],
    )
    def test_skip_bootstrap(self, value, expected):
        with patch.dict(os.environ, {"SKIP_BOOTSTRAP": value}, clear=True):
            config = load_templated_yaml(PROJECT_CONFIG)

        assert config.database.skip_bootstrap is expected

    def test_invalid_port_is_rejected(self):
        with patch.dict(os.environ, {"SERVER_PORT": "eighty"}, clear=True):
            with pytest.raises(ValueError, match="Invalid configuration"):
                load_templated_yaml(PROJECT_CONFIG)

    def test_environment_prefixed_override(self):
        env = {"APP_ENVIRONMENT": "test", "TEST_DATABASE_NAME": "bookdb_test"}
        with patch.dict(os.environ, env, clear=True):
            config = load_templated_yaml(PROJECT_CONFIG)

        assert config.app.environment == "test"
        assert config.database.name == "bookdb_test"

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("config: [unclosed\n")

        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="Error parsing YAML"):
                load_templated_yaml(path)

    def test_empty_config_section_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("config:\n")

        with patch.dict(os.environ, {}, clear=True):
            assert load_templated_yaml(path) == ConfigData()


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, tmp_path):
        with patch.dict(
            os.environ, {"APP_CONFIG_FILE": str(tmp_path / "absent.yaml")}, clear=True
        ):
            assert load_config() == ConfigData()

    def test_reads_named_file(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("config:\n  app:\n    port: 9999\n")

        with patch.dict(os.environ, {"APP_CONFIG_FILE": str(path)}, clear=True):
            assert load_config().app.port == 9999
