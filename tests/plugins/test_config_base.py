# tests/plugins/test_config_base.py
"""Tests for plugin configuration decoding."""

import json
from typing import Any

import pytest


class TestPluginSettings:
    """Secure configuration: {"AccountName": ..., "Key": ...}."""

    def test_decodes_account_name_and_key(self) -> None:
        from crmforward.plugins.config_base import PluginSettings

        settings = PluginSettings.from_secure_config('{"AccountName": "acct1", "Key": "k"}')

        assert settings.account_name == "acct1"
        assert settings.key.get_secret_value() == "k"

    def test_unknown_members_ignored(self) -> None:
        from crmforward.plugins.config_base import PluginSettings

        settings = PluginSettings.from_secure_config(json.dumps({"AccountName": "acct1", "Key": "k", "Comment": "prod"}))

        assert settings.account_name == "acct1"

    def test_key_not_in_repr(self) -> None:
        from crmforward.plugins.config_base import PluginSettings

        settings = PluginSettings.from_secure_config('{"AccountName": "acct1", "Key": "super-secret"}')

        assert "super-secret" not in repr(settings)
        assert "super-secret" not in str(settings)

    @pytest.mark.parametrize("secure_config", [None, "", "   "])
    def test_missing_config_raises(self, secure_config: str | None) -> None:
        from crmforward.plugins.config_base import ConfigError, PluginSettings

        with pytest.raises(ConfigError, match="missing"):
            PluginSettings.from_secure_config(secure_config)

    @pytest.mark.parametrize(
        "secure_config",
        [
            "not json",
            "[1, 2]",
            '"acct1"',
            '{"AccountName": "acct1"}',
            '{"Key": "k"}',
            '{"AccountName": 5, "Key": "k"}',
        ],
    )
    def test_malformed_config_raises(self, secure_config: str) -> None:
        from crmforward.plugins.config_base import ConfigError, PluginSettings

        with pytest.raises(ConfigError, match="Invalid secure configuration"):
            PluginSettings.from_secure_config(secure_config)

    def test_error_does_not_echo_key(self) -> None:
        from crmforward.plugins.config_base import ConfigError, PluginSettings

        with pytest.raises(ConfigError) as exc_info:
            PluginSettings.from_secure_config('{"AccountName": 5, "Key": "super-secret"}')

        assert "super-secret" not in str(exc_info.value)

    def test_config_error_is_plugin_config_error(self) -> None:
        from crmforward.plugins.config_base import ConfigError, PluginConfigError

        assert issubclass(ConfigError, PluginConfigError)


class TestParseUnsecureConfig:
    @pytest.mark.parametrize("unsecure_config", [None, "", "  "])
    def test_blank_means_no_options(self, unsecure_config: str | None) -> None:
        from crmforward.plugins.config_base import parse_unsecure_config

        assert parse_unsecure_config(unsecure_config) == {}

    def test_json_object_returned(self) -> None:
        from crmforward.plugins.config_base import parse_unsecure_config

        assert parse_unsecure_config('{"payload_shape": "underscored"}') == {"payload_shape": "underscored"}

    @pytest.mark.parametrize("unsecure_config", ["oops", "[]", "42"])
    def test_non_object_raises(self, unsecure_config: str) -> None:
        from crmforward.plugins.config_base import ConfigError, parse_unsecure_config

        with pytest.raises(ConfigError, match="Invalid unsecure configuration"):
            parse_unsecure_config(unsecure_config)


class TestPluginConfig:
    def test_from_dict_rejects_unknown_fields(self) -> None:
        from crmforward.plugins.config_base import PluginConfig, PluginConfigError

        class ExampleConfig(PluginConfig):
            name: str

        with pytest.raises(PluginConfigError, match="Extra inputs"):
            ExampleConfig.from_dict({"name": "x", "unknown": 1})

    def test_from_dict_rejects_non_dict(self) -> None:
        from crmforward.plugins.config_base import PluginConfig, PluginConfigError

        class ExampleConfig(PluginConfig):
            name: str

        bad: Any = ["name"]
        with pytest.raises(PluginConfigError, match="config must be a dict"):
            ExampleConfig.from_dict(bad)
