from __future__ import annotations

import logging
import os
from dataclasses import dataclass


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_list(name: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in os.getenv(name, "").split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Runtime settings. CLI flags override whatever the environment says."""

    host: str = "127.0.0.1"
    port: int = 8081
    timeout_s: float = 30.0
    log_level: str = "info"
    demo_interval_s: float = 300.0
    attach_url: str = ""
    cors_origins: tuple[str, ...] = ()

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=os.getenv("MEMREST_HOST", cls.host),
            port=int(_env_float("MEMREST_PORT", cls.port)),
            timeout_s=_env_float("MEMREST_TIMEOUT", cls.timeout_s),
            log_level=os.getenv("MEMREST_LOG_LEVEL", cls.log_level).lower(),
            demo_interval_s=_env_float("MEMREST_DEMO_INTERVAL", cls.demo_interval_s),
            attach_url=os.getenv("MEMREST_URL", ""),
            cors_origins=_env_list("MEMREST_CORS_ORIGINS"),
        )


def setup_logging(level: str = "info") -> None:
    """Configure the root logger once; later calls only adjust the level."""

    root = logging.getLogger()
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)
    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
