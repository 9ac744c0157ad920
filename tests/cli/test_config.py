"""Tests for CLI configuration loading and validation."""

import pytest
import yaml

from src.cli.config import (
    EDIConfig,
    FloorLinkConfig,
    ServerConfig,
    get_config,
    load_config,
    resolve_env_vars,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Drop FLOORLINK_* and ODOO_* variables from the test process."""
    import os

    for key in list(os.environ):
        if key.startswith(("FLOORLINK_", "ODOO_")):
            monkeypatch.delenv(key)


class TestSectionDefaults:

    def test_server_defaults(self):
        cfg = ServerConfig()
        assert cfg.host == "127.0.0.1"
        assert cfg.port == 8000

    def test_edi_defaults(self):
        cfg = EDIConfig()
        assert cfg.sender_id == "SENDER"
        assert cfg.usage_indicator == "P"
        assert cfg.stream is False
        assert cfg.strict_totals is False
        assert cfg.seller.name == "Nationwide Floorcovering"

    def test_envelope_template(self):
        envelope = EDIConfig(sender_id="FLOORCO", usage_indicator="T", stream=True).envelope_template()
        assert envelope.sender_id == "FLOORCO"
        assert envelope.usage_indicator == "T"
        assert envelope.segment_separator == ""

    def test_numeric_ids_are_kept_as_strings(self):
        assert EDIConfig(sender_id=123456789).sender_id == "123456789"

    def test_control_numbers_use_file(self, tmp_path):
        store = tmp_path / "numbers.json"
        gen = EDIConfig(control_number_file=str(store), sender_id="FLOORCO").control_numbers()

        envelope = gen.next_envelope()

        assert envelope.interchange_control_number == 1
        assert envelope.sender_id == "FLOORCO"
        assert store.exists()

    def test_usage_indicator_is_validated(self):
        with pytest.raises(ValueError):
            EDIConfig(usage_indicator="X")


class TestResolveEnvVars:

    def test_resolves_env_var(self, monkeypatch):
        monkeypatch.setenv("PARTNER_KEY", "k-123")
        assert resolve_env_vars("${PARTNER_KEY}") == "k-123"

    def test_passthrough_no_vars(self):
        assert resolve_env_vars("plain") == "plain"

    def test_missing_env_var_returns_empty(self):
        assert resolve_env_vars("${FLOORLINK_TEST_UNSET_VAR}") == ""

    def test_mixed_content(self, monkeypatch):
        monkeypatch.setenv("ODOO_HOST", "erp.example")
        assert resolve_env_vars("https://${ODOO_HOST}:8069") == "https://erp.example:8069"


class TestLoadConfig:

    def test_load_from_explicit_path(self, tmp_path):
        config_file = tmp_path / "floorlink.yaml"
        config_file.write_text(yaml.dump({"server": {"port": 9000}, "edi": {"sender_id": "FLOORCO"}}))

        cfg = load_config(str(config_file))

        assert cfg.server.port == 9000
        assert cfg.edi.sender_id == "FLOORCO"
        assert cfg.edi.receiver_id == "RECEIVER"

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_returns_none_when_no_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert load_config() is None

    def test_finds_config_in_working_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "floorlink.yaml").write_text(yaml.dump({"edi": {"strict_totals": True}}))
        assert load_config().edi.strict_totals is True

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "floorlink.yaml"
        config_file.write_text("")
        assert load_config(str(config_file)) == FloorLinkConfig()

    def test_env_var_override(self, tmp_path, monkeypatch):
        config_file = tmp_path / "floorlink.yaml"
        config_file.write_text(yaml.dump({"server": {"port": 8000}}))
        monkeypatch.setenv("FLOORLINK_SERVER_PORT", "9999")
        monkeypatch.setenv("FLOORLINK_EDI_STRICT_TOTALS", "true")
        monkeypatch.setenv("FLOORLINK_EDI_SENDER_ID", "FLOORCO")

        cfg = load_config(str(config_file))

        assert cfg.server.port == 9999
        assert cfg.edi.strict_totals is True
        assert cfg.edi.sender_id == "FLOORCO"

    def test_unrelated_floorlink_vars_are_ignored(self, tmp_path, monkeypatch):
        config_file = tmp_path / "floorlink.yaml"
        config_file.write_text("{}")
        monkeypatch.setenv("FLOORLINK_PARTNER_API_KEY", "x" * 40)
        monkeypatch.setenv("FLOORLINK_CONFIG_PATH", str(config_file))

        assert load_config(str(config_file)) == FloorLinkConfig()

    def test_dollar_var_resolution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PARTNER_KEY", "secret-123")
        config_file = tmp_path / "floorlink.yaml"
        config_file.write_text(
            yaml.dump(
                {
                    "transmission": {
                        "default_recipient": {
                            "method": "api",
                            "endpoint": "https://partner.example/edi",
                            "credentials": {"apiKey": "${PARTNER_KEY}"},
                        }
                    }
                }
            )
        )

        recipient = load_config(str(config_file)).transmission.default_recipient

        assert recipient.method == "API"
        assert recipient.credentials.api_key == "secret-123"

    def test_odoo_falls_back_to_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ODOO_URL", "https://erp.example/")
        monkeypatch.setenv("ODOO_PASSWORD", "from-env")
        config_file = tmp_path / "floorlink.yaml"
        config_file.write_text(yaml.dump({"odoo": {"db": "floors"}}))

        cfg = load_config(str(config_file))

        assert cfg.odoo.url == "https://erp.example"
        assert cfg.odoo.password == "from-env"
        assert cfg.odoo.db == "floors"

    def test_file_wins_over_odoo_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ODOO_DB", "env-db")
        config_file = tmp_path / "floorlink.yaml"
        config_file.write_text(yaml.dump({"odoo": {"db": "file-db"}}))
        assert load_config(str(config_file)).odoo.db == "file-db"


class TestGetConfig:

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("FLOORLINK_EDI_RECEIVER_ID", "PARTNER")
        monkeypatch.setenv("ODOO_DB", "floors")

        cfg = get_config()

        assert cfg.edi.receiver_id == "PARTNER"
        assert cfg.odoo.db == "floors"
        assert cfg.transmission.default_recipient is None
