from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from negachess.eval import PERSPECTIVE_MOVER, PERSPECTIVES


ENV_PREFIX = "NEGACHESS_"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the server and the automated player."""

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    search_depth: int = 3
    max_depth: int = 6
    eval_perspective: str = PERSPECTIVE_MOVER

    def __post_init__(self) -> None:
        if not (0 < self.port < 65536):
            raise ValueError(f"{ENV_PREFIX}PORT must be between 1 and 65535, got {self.port}")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"{ENV_PREFIX}LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            )
        if not (1 <= self.search_depth <= self.max_depth):
            raise ValueError(
                f"{ENV_PREFIX}SEARCH_DEPTH must be between 1 and {ENV_PREFIX}MAX_DEPTH"
            )
        if self.eval_perspective not in PERSPECTIVES:
            raise ValueError(
                f"{ENV_PREFIX}EVAL_PERSPECTIVE must be one of {', '.join(PERSPECTIVES)}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``NEGACHESS_*`` environment variables.

        Raises:
            ValueError: If a numeric variable does not parse or a value is out
                of range.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            host=env.get(ENV_PREFIX + "HOST", defaults.host),
            port=_int_var(env, "PORT", defaults.port),
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL", defaults.log_level).upper(),
            search_depth=_int_var(env, "SEARCH_DEPTH", defaults.search_depth),
            max_depth=_int_var(env, "MAX_DEPTH", defaults.max_depth),
            eval_perspective=env.get(
                ENV_PREFIX + "EVAL_PERSPECTIVE", defaults.eval_perspective
            ).lower(),
        )


def _int_var(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e
