"""Tests for application configuration."""

import yaml

from samlraider.core import config as core_config
from samlraider.core.config import (
    DEFAULT_XSLT_PAYLOAD,
    DEFAULT_XXE_SERVER_URL,
    AppConfig,
    get_default_config_yaml,
    load_config,
)
from samlraider.core.saml.codec import Binding


class TestDefaults:
    """Tests for default configuration values."""

    def test_defaults_without_file(self):
        """Test that defaults are used when no file exists."""
        config = load_config()
        assert config.codec.default_binding == Binding.POST
        assert config.attacks.xxe_server_url == DEFAULT_XXE_SERVER_URL
        assert config.attacks.xslt_payload == DEFAULT_XSLT_PAYLOAD
        assert config.logging.level == "ERROR"
        assert config.logging.trace_enabled is False
        assert config.logging.log_file is None
        assert config.config_path is None

    def test_default_yaml_parses(self):
        """Test that the generated default file loads to the defaults."""
        data = yaml.safe_load(get_default_config_yaml())
        config = AppConfig.from_dict(data)
        assert config.codec.default_binding == Binding.POST
        assert config.attacks.xxe_server_url == DEFAULT_XXE_SERVER_URL
        assert config.logging.level == "ERROR"


class TestConfigFile:
    """Tests for loading config.yaml."""

    def test_load_file(self, tmp_path):
        """Test loading every section from a file."""
        path = tmp_path / "custom.yaml"
        path.write_text(
            "codec:\n  default_binding: redirect\n"
            "attacks:\n  xxe_server_url: http://oob.test/a.dtd\n"
            "logging:\n  level: debug\n  log_file: /tmp/samlraider.log\n"
        )
        config = load_config(path)
        assert config.codec.default_binding == Binding.REDIRECT
        assert config.attacks.xxe_server_url == "http://oob.test/a.dtd"
        assert config.attacks.xslt_payload == DEFAULT_XSLT_PAYLOAD
        assert config.logging.level == "DEBUG"
        assert str(config.logging.log_file) == "/tmp/samlraider.log"
        assert config.config_path == path

    def test_default_location(self, tmp_path):
        """Test that the default file location is read."""
        core_config.DEFAULT_CONFIG_FILE.write_text("logging:\n  level: INFO\n")
        assert load_config().logging.level == "INFO"

    def test_unknown_binding_falls_back(self, tmp_path, caplog):
        """Test that an unknown binding keeps the default."""
        path = tmp_path / "custom.yaml"
        path.write_text("codec:\n  default_binding: SOAP\n")
        config = load_config(path)
        assert config.codec.default_binding == Binding.POST
        assert "Unknown binding" in caplog.text

    def test_invalid_yaml_uses_defaults(self, tmp_path, caplog):
        """Test that an unparseable file is ignored."""
        path = tmp_path / "broken.yaml"
        path.write_text("codec: [unclosed\n")
        config = load_config(path)
        assert config.codec.default_binding == Binding.POST
        assert config.config_path is None
        assert "Ignoring invalid config file" in caplog.text

    def test_empty_file(self, tmp_path):
        """Test that an empty file gives the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path).attacks.xxe_server_url == DEFAULT_XXE_SERVER_URL

    def test_save_round_trip(self, tmp_path):
        """Test saving and reloading a configuration."""
        config = AppConfig()
        config.codec.default_binding = Binding.REDIRECT
        config.logging.trace_enabled = True
        path = tmp_path / "nested" / "saved.yaml"
        config.save(path)

        reloaded = load_config(path)
        assert reloaded.codec.default_binding == Binding.REDIRECT
        assert reloaded.logging.trace_enabled is True


class TestEnvironmentOverrides:
    """Tests for SAMLRAIDER_ environment variables."""

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        """Test that environment variables win over the file."""
        path = tmp_path / "custom.yaml"
        path.write_text("attacks:\n  xxe_server_url: http://file.test/a.dtd\n")
        monkeypatch.setenv("SAMLRAIDER_XXE_SERVER_URL", "http://env.test/a.dtd")
        monkeypatch.setenv("SAMLRAIDER_DEFAULT_BINDING", "Redirect")
        monkeypatch.setenv("SAMLRAIDER_XSLT_PAYLOAD", "<x/>")

        config = load_config(path)
        assert config.attacks.xxe_server_url == "http://env.test/a.dtd"
        assert config.codec.default_binding == Binding.REDIRECT
        assert config.attacks.xslt_payload == "<x/>"

    def test_logging_env(self, monkeypatch, tmp_path):
        """Test logging overrides."""
        monkeypatch.setenv("SAMLRAIDER_LOG_LEVEL", "trace")
        monkeypatch.setenv("SAMLRAIDER_TRACE_ENABLED", "yes")
        monkeypatch.setenv("SAMLRAIDER_LOG_FILE", str(tmp_path / "ops.log"))

        settings = load_config().logging
        assert settings.level == "TRACE"
        assert settings.trace_enabled is True
        assert settings.log_file == tmp_path / "ops.log"

    def test_false_trace_env(self, monkeypatch, tmp_path):
        """Test that a false value disables trace set in the file."""
        path = tmp_path / "custom.yaml"
        path.write_text("logging:\n  trace_enabled: true\n")
        monkeypatch.setenv("SAMLRAIDER_TRACE_ENABLED", "0")
        assert load_config(path).logging.trace_enabled is False
