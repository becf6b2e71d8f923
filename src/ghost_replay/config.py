"""Runtime settings read from the environment.

Call :func:`dotenv.load_dotenv` at the entry point before :meth:`Settings.from_env`
so values from a project ``.env`` file are visible.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    if not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Args:
        data_dir: Directory scanned for ``.csv`` recordings.
        micro_sector_m: Micro-sector length used for the ideal lap.
        resample_step_m: Arc-length resampling resolution.
    """

    data_dir: str = "data"
    micro_sector_m: float = 50.0
    resample_step_m: float = 5.0

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``GHOST_REPLAY_*`` environment variables.

        Raises:
            ValueError: If a numeric variable cannot be parsed.
        """
        return cls(
            data_dir=os.environ.get("GHOST_REPLAY_DATA_DIR", "data"),
            micro_sector_m=_env_float("GHOST_REPLAY_MICRO_SECTOR_M", 50.0),
            resample_step_m=_env_float("GHOST_REPLAY_RESAMPLE_STEP_M", 5.0),
        )
