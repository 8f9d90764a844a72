from __future__ import annotations

import pytest

from pyparking.config import ParkingConfig
from pyparking.exceptions import ParkingConfigError


def test_defaults() -> None:
    config = ParkingConfig()
    assert config.base_url == "http://localhost:3000/api/v1"
    assert config.ws_url == "ws://localhost:3000/api/v1/ws"
    assert config.reconnect_base_delay == 1.0
    assert config.max_reconnect_attempts == 5
    assert config.offline_mode_enabled is True


@pytest.mark.parametrize("environment", ["production", " Production "])
def test_production_disables_offline_mode(environment: str) -> None:
    assert ParkingConfig(environment=environment).offline_mode_enabled is False


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PARKING_BASE_URL", "https://parking.example.com/api/v1")
    monkeypatch.setenv("PARKING_ENV", "production")
    monkeypatch.setenv("PARKING_RECONNECT_BASE_DELAY", "0.5")
    monkeypatch.setenv("PARKING_MAX_RECONNECT_ATTEMPTS", "3")
    monkeypatch.setenv("PARKING_REPLAY_SUBSCRIPTIONS", "off")

    config = ParkingConfig.from_env()

    assert config.base_url == "https://parking.example.com/api/v1"
    assert config.environment == "production"
    assert config.reconnect_base_delay == 0.5
    assert config.max_reconnect_attempts == 3
    assert config.replay_subscriptions is False


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PARKING_MAX_RECONNECT_ATTEMPTS", "3")
    config = ParkingConfig.from_env(max_reconnect_attempts=7, environment="staging")
    assert config.max_reconnect_attempts == 7
    assert config.environment == "staging"


def test_from_env_rejects_bad_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PARKING_REQUEST_TIMEOUT", "soon")
    with pytest.raises(ParkingConfigError):
        ParkingConfig.from_env()


def test_negative_delay_rejected() -> None:
    with pytest.raises(ParkingConfigError):
        ParkingConfig(reconnect_base_delay=-1)
