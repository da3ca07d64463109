# src/crmforward/plugins/config_base.py
"""Typed configuration for sinks and CRM plugins.

Two kinds of configuration reach a CRM plugin:

- Sink configuration: a dict validated by a PluginConfig subclass. Unknown
  fields are rejected.
- Registration strings: the host hands every plugin an "unsecure" and a
  "secure" configuration string when the step is registered. The secure
  string carries the storage credentials as {"AccountName": ..., "Key": ...};
  the unsecure string may carry a JSON object of sink options.

Example usage:
    settings = PluginSettings.from_secure_config('{"AccountName": "acct1", "Key": "k"}')
    settings.account_name  # "acct1"
    settings.key.get_secret_value()  # "k"
"""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, SecretStr, TypeAdapter, ValidationError

_JSON_OBJECT: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])


class PluginConfigError(Exception):
    """Raised when plugin configuration is invalid."""

    pass


class ConfigError(PluginConfigError):
    """Raised when a registration configuration string cannot be decoded."""

    pass


class PluginConfig(BaseModel):
    """Base class for typed sink configurations."""

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> Self:
        """Create config from dict with clear error on validation failure.

        Raises:
            PluginConfigError: If configuration is invalid.
        """
        if not isinstance(config, dict):
            raise PluginConfigError(f"Invalid configuration for {cls.__name__}: config must be a dict, got {type(config).__name__}.")

        try:
            return cls.model_validate(config)
        except ValidationError as e:
            raise PluginConfigError(f"Invalid configuration for {cls.__name__}: {e}") from e


class PluginSettings(BaseModel):
    """Storage credentials decoded from the secure configuration string.

    Field names on the wire are AccountName and Key. Unknown members are
    ignored. Nothing beyond presence is validated here; the storage SDK
    rejects unusable values when it is called.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    account_name: str = Field(alias="AccountName", description="Azure Storage account name")
    key: SecretStr = Field(alias="Key", description="Base64 encoded account access key")

    @classmethod
    def from_secure_config(cls, secure_config: str | None) -> Self:
        """Decode the secure configuration string.

        Raises:
            ConfigError: If the string is missing, blank, not JSON, not a JSON
                object, or lacks AccountName/Key.
        """
        if secure_config is None or not secure_config.strip():
            raise ConfigError("Secure configuration is missing. Expected JSON with AccountName and Key.")

        try:
            return cls.model_validate_json(secure_config)
        except ValidationError as e:
            # errors() carries only locations and messages, never the input value
            problems = "; ".join(f"{'.'.join(str(p) for p in err['loc']) or 'root'}: {err['msg']}" for err in e.errors())
            raise ConfigError(f"Invalid secure configuration: {problems}") from None


def parse_unsecure_config(unsecure_config: str | None) -> dict[str, Any]:
    """Decode the unsecure configuration string into sink options.

    Blank or missing means no options.

    Raises:
        ConfigError: If the string is not a JSON object.
    """
    if unsecure_config is None or not unsecure_config.strip():
        return {}

    try:
        return _JSON_OBJECT.validate_json(unsecure_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid unsecure configuration: expected a JSON object of sink options ({e.error_count()} error(s))") from e
