"""Run configuration dataclass."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from rust_quality.errors import ConfigError

ENV_JOBS = "RUST_QUALITY_JOBS"
ENV_EXCLUDE = "RUST_QUALITY_EXCLUDE"


def _env_jobs(environ: Mapping[str, str]) -> int:
    raw = environ.get(ENV_JOBS, "").strip()
    if not raw:
        return 0
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{ENV_JOBS} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ConfigError(f"{ENV_JOBS} must be >= 0, got {value}")
    return value


def _env_exclude(environ: Mapping[str, str]) -> tuple[str, ...]:
    raw = environ.get(ENV_EXCLUDE, "")
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class RunConfig:
    """Immutable run configuration.

    There is no per-rule configuration; the rule set is fixed.
    """

    root: Path = Path(".")
    analyzer: str | None = None
    jobs: int = 0                 # 0 = auto
    exclude_dirs: tuple[str, ...] = ()
    color: bool | None = None     # None = let the terminal decide

    @property
    def workers(self) -> int:
        if self.jobs > 0:
            return self.jobs
        return min(32, (os.cpu_count() or 1) + 4)

    @classmethod
    def from_env(
        cls,
        root: Path | str = ".",
        *,
        analyzer: str | None = None,
        jobs: int | None = None,
        color: bool | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> RunConfig:
        """Build a config from explicit values with environment fallbacks.

        Explicit *jobs* wins over ``RUST_QUALITY_JOBS``; excluded
        directories come only from ``RUST_QUALITY_EXCLUDE``.
        """
        env = os.environ if environ is None else environ
        return cls(
            root=Path(root),
            analyzer=analyzer,
            jobs=jobs if jobs is not None else _env_jobs(env),
            exclude_dirs=_env_exclude(env),
            color=color,
        )
