"""
config.py
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    lookup_timeout: float = 5.0         # seconds per registry / ledger call
    registry_latency: float = 0.0       # simulated network delay for in-memory registries
    text_confidence: float = 1.0        # confidence given to plain-text input
    default_currency: str = "ZAR"
    simulation_seed: Optional[int] = None
    log_level: str = "INFO"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def load_settings() -> Settings:
    """Read settings from the environment (and a .env file if present)."""
    seed = os.getenv("FRAUDCHECK_SIMULATION_SEED")
    return Settings(
        lookup_timeout   = _float_env("FRAUDCHECK_LOOKUP_TIMEOUT", 5.0),
        registry_latency = _float_env("FRAUDCHECK_REGISTRY_LATENCY", 0.0),
        text_confidence  = _float_env("FRAUDCHECK_TEXT_CONFIDENCE", 1.0),
        default_currency = os.getenv("FRAUDCHECK_DEFAULT_CURRENCY", "ZAR").upper(),
        simulation_seed  = int(seed) if seed else None,
        log_level        = os.getenv("FRAUDCHECK_LOG_LEVEL", "INFO").upper(),
    )
