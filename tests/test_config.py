"""Tests for gateway configuration."""

from __future__ import annotations

import pytest

from silasign import ConfigError, GatewayConfig

APP_ADDR = "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"
APP_PRIV_HEX = "0x" + "00" * 31 + "01"

ENV = {
    "SILA_GATEWAY": "https://gateway.test/0.2/",
    "SILA_APP_HANDLE": "app.silamoney.eth",
    "SILA_APP_ADDRESS": APP_ADDR,
    "SILA_APP_KEY": APP_PRIV_HEX,
}


def test_from_env() -> None:
    config = GatewayConfig.from_env(ENV)
    assert config.gateway == "https://gateway.test/0.2"
    assert config.app_handle == "app.silamoney.eth"
    assert config.app_private_key == APP_PRIV_HEX
    assert config.version == "0.2"
    assert config.timeout == 30.0
    assert config.url("check_handle") == "https://gateway.test/0.2/check_handle"
    assert config.url("/update/email") == "https://gateway.test/0.2/update/email"


def test_from_env_optional_values() -> None:
    env = dict(ENV, SILA_TIMEOUT="2.5", SILA_VERSION="0.3", SILA_APP_KEY="")
    config = GatewayConfig.from_env(env)
    assert config.timeout == 2.5
    assert config.version == "0.3"
    assert config.app_private_key is None


def test_from_env_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name, value in ENV.items():
        monkeypatch.setenv(name, value)
    assert GatewayConfig.from_env().app_handle == "app.silamoney.eth"


@pytest.mark.parametrize("missing", ["SILA_GATEWAY", "SILA_APP_HANDLE", "SILA_APP_ADDRESS"])
def test_from_env_missing_variable(missing: str) -> None:
    env = {k: v for k, v in ENV.items() if k != missing}
    with pytest.raises(ConfigError, match=missing):
        GatewayConfig.from_env(env)


def test_from_env_bad_timeout() -> None:
    with pytest.raises(ConfigError):
        GatewayConfig.from_env(dict(ENV, SILA_TIMEOUT="soon"))


def test_config_requires_gateway_and_handle() -> None:
    with pytest.raises(ConfigError):
        GatewayConfig(gateway="", app_handle="app", app_address=APP_ADDR)
    with pytest.raises(ConfigError):
        GatewayConfig(gateway="https://gateway.test", app_handle="", app_address=APP_ADDR)


def test_app_key() -> None:
    key = GatewayConfig.from_env(ENV).app_key()
    assert key.checksum_address == APP_ADDR
    assert key.private_key == bytes(31) + b"\x01"


def test_app_key_without_private_key() -> None:
    config = GatewayConfig(gateway="https://gateway.test", app_handle="app", app_address=APP_ADDR)
    assert not config.app_key().has_private_key


def test_app_key_malformed() -> None:
    config = GatewayConfig(gateway="https://gateway.test", app_handle="app", app_address="0xabc")
    with pytest.raises(ConfigError):
        config.app_key()


def test_repr_hides_private_key() -> None:
    assert APP_PRIV_HEX not in repr(GatewayConfig.from_env(ENV))
