from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# attributes every LogRecord has; anything else came in through `extra=`
_RECORD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "asctime"}


class ExtraFormatter(logging.Formatter):
    """Appends the `extra=` payload of an event as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}
        if extras:
            line += " " + " ".join(f"{k}={v}" for k, v in sorted(extras.items()))
        return line


def _env_int(env: Mapping[str, str], name: str, default: int, minimum: int = 0) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class ArcanaConfig:
    rng_seed: int = 1337
    log_level: str = "WARNING"
    chain_lightning_max: int = 2
    poison_turns: int = 3

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ArcanaConfig":
        env = os.environ if env is None else env
        level = env.get("ARCANA_LOG_LEVEL", cls.log_level).strip().upper()
        if level not in _LEVELS:
            raise ValueError(f"ARCANA_LOG_LEVEL must be one of {', '.join(_LEVELS)}, got {level!r}")
        return cls(
            rng_seed=_env_int(env, "ARCANA_RNG_SEED", cls.rng_seed),
            log_level=level,
            chain_lightning_max=_env_int(env, "ARCANA_CHAIN_LIGHTNING_MAX", cls.chain_lightning_max),
            poison_turns=_env_int(env, "ARCANA_POISON_TURNS", cls.poison_turns, minimum=1),
        )

    def configure_logging(self) -> None:
        handler = logging.StreamHandler()
        handler.setFormatter(ExtraFormatter(_LOG_FORMAT))
        logging.basicConfig(level=getattr(logging, self.log_level), handlers=[handler])
