import pytest

from daytoken.adapters.generator.random_digits import RandomDigitGenerator
from daytoken.adapters.generator.totp import TotpGenerator
from daytoken.application.engine import TokenLifecycleEngine
from daytoken.config import build_components, load_settings
from daytoken.infrastructure.clock import ManualClock

ENV_KEYS = (
    "DAYTOKEN_CYCLE_SECONDS",
    "DAYTOKEN_DIGITS",
    "DAYTOKEN_TICK_INTERVAL",
    "DAYTOKEN_GENERATOR",
    "DAYTOKEN_TOTP_SECRET",
    "DAYTOKEN_TOTP_INTERVAL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_file(tmp_path):
    settings = load_settings(tmp_path / "missing.toml")
    assert settings.token.cycle_seconds == 60.0
    assert settings.token.digits == 6
    assert settings.token.tick_interval == 0.05
    assert settings.token.generator == "random"


def test_file_values_and_env_override(tmp_path, monkeypatch):
    path = tmp_path / "settings.toml"
    path.write_text('[token]\ncycle_seconds = 30\ndigits = 8\ngenerator = "TOTP"\n')
    monkeypatch.setenv("DAYTOKEN_CYCLE_SECONDS", "45")

    settings = load_settings(path)
    assert settings.token.cycle_seconds == 45.0
    assert settings.token.digits == 8
    assert settings.token.generator == "totp"


def test_build_components_wires_random_engine(tmp_path):
    clock = ManualClock(0.0)
    components = build_components(load_settings(tmp_path / "missing.toml"), clock=clock)
    engine = components["engine"]
    assert isinstance(engine, TokenLifecycleEngine)
    assert isinstance(components["generator"], RandomDigitGenerator)
    assert components["clock"] is clock
    assert engine.start().remaining == 60.0


def test_build_components_wires_totp_engine(tmp_path, monkeypatch):
    monkeypatch.setenv("DAYTOKEN_GENERATOR", "totp")
    monkeypatch.setenv("DAYTOKEN_TOTP_SECRET", "JBSWY3DPEHPK3PXP")
    components = build_components(load_settings(tmp_path / "missing.toml"))
    assert isinstance(components["generator"], TotpGenerator)
    assert components["engine"].start().credential.value.isdigit()


def test_unknown_generator_is_rejected(tmp_path, monkeypatch):
    monkeypatch.setenv("DAYTOKEN_GENERATOR", "dice")
    with pytest.raises(ValueError):
        build_components(load_settings(tmp_path / "missing.toml"))
