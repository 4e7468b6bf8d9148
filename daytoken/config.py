import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import tomllib

from .adapters.generator.random_digits import RandomDigitGenerator
from .adapters.generator.totp import TotpGenerator
from .adapters.history.in_memory import InMemoryStatusHistory
from .application.bus import EventBus
from .application.engine import TokenLifecycleEngine
from .infrastructure.clock import Clock, MonotonicClock
from .ports.generator import TokenGenerator
from .ports.history import StatusHistoryPort

DEFAULT_SETTINGS_PATH = Path("config/settings.toml")
GENERATORS = ("random", "totp")


@dataclass
class TokenSettings:
    cycle_seconds: float
    digits: int
    tick_interval: float
    generator: str
    totp_secret: str
    totp_interval: int


@dataclass
class Settings:
    token: TokenSettings


def load_settings(settings_path: Path = DEFAULT_SETTINGS_PATH) -> Settings:
    """Load configuration from environment with optional config file defaults."""

    file_settings = _load_file_settings(settings_path)

    return Settings(
        token=TokenSettings(
            cycle_seconds=float(
                _config_value("DAYTOKEN_CYCLE_SECONDS", file_settings, "token", "cycle_seconds", "60")
            ),
            digits=int(_config_value("DAYTOKEN_DIGITS", file_settings, "token", "digits", "6")),
            tick_interval=float(
                _config_value("DAYTOKEN_TICK_INTERVAL", file_settings, "token", "tick_interval", "0.05")
            ),
            generator=_config_value("DAYTOKEN_GENERATOR", file_settings, "token", "generator", "random").lower(),
            totp_secret=_config_value("DAYTOKEN_TOTP_SECRET", file_settings, "token", "totp_secret", ""),
            totp_interval=int(
                _config_value("DAYTOKEN_TOTP_INTERVAL", file_settings, "token", "totp_interval", "30")
            ),
        ),
    )


def _load_file_settings(settings_path: Path) -> Dict[str, Any]:
    if not settings_path.exists():
        return {}

    with settings_path.open("rb") as settings_file:
        return tomllib.load(settings_file)


def _config_value(
    env_key: str, settings: Dict[str, Any], section: str, key: str, default: str
) -> str:
    if env_key in os.environ:
        return os.environ[env_key]

    section_data = settings.get(section, {})
    return str(section_data.get(key, default))


def build_generator(settings: TokenSettings) -> TokenGenerator:
    if settings.generator == "random":
        return RandomDigitGenerator(digits=settings.digits)
    if settings.generator == "totp":
        return TotpGenerator(
            secret=settings.totp_secret,
            digits=settings.digits,
            interval=settings.totp_interval,
        )
    raise ValueError(f"Unknown token generator {settings.generator!r}, expected one of {GENERATORS}")


def build_components(settings: Optional[Settings] = None, clock: Optional[Clock] = None) -> dict:
    """Construct the token engine and its collaborators for wiring in main.py."""

    settings = settings or load_settings()
    clock = clock or MonotonicClock()
    generator = build_generator(settings.token)
    engine = TokenLifecycleEngine(
        generator=generator,
        clock=clock,
        cycle_duration=settings.token.cycle_seconds,
        digits=settings.token.digits,
    )
    status_history: StatusHistoryPort = InMemoryStatusHistory()
    return {
        "settings": settings,
        "clock": clock,
        "generator": generator,
        "engine": engine,
        "bus": EventBus(),
        "status_history": status_history,
    }
