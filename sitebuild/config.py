"""
Runtime settings read from the environment.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_BUILD_CONCURRENCY = 1
TRUTHY = {"1", "true", "yes", "on"}


def _parse_concurrency(raw: Optional[str]) -> int:
    if not raw:
        return DEFAULT_BUILD_CONCURRENCY
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid SST_BUILD_CONCURRENCY={raw!r}")
        return DEFAULT_BUILD_CONCURRENCY
    if value < 1:
        logger.warning(f"Ignoring invalid SST_BUILD_CONCURRENCY={raw!r}")
        return DEFAULT_BUILD_CONCURRENCY
    return value


@dataclass
class Settings:
    """Process-wide knobs for site builds."""
    skip: bool = False                      # SKIP: return site paths without building
    dev: bool = False                       # SST_DEV: dev mode never runs builds
    app_name: str = "app"
    stage: str = "dev"
    workspace_root: Optional[Path] = None   # where root lockfiles live, cwd when read from env
    build_concurrency: int = DEFAULT_BUILD_CONCURRENCY
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from, defaults to os.environ

        Returns:
            Settings
        """
        env = os.environ if environ is None else environ
        root = env.get("SST_ROOT")
        return cls(
            skip=bool(env.get("SKIP")),
            dev=env.get("SST_DEV", "").lower() in TRUTHY,
            app_name=env.get("SST_APP", "app"),
            stage=env.get("SST_STAGE", "dev"),
            workspace_root=Path(root) if root else Path.cwd(),
            build_concurrency=_parse_concurrency(env.get("SST_BUILD_CONCURRENCY")),
            log_level=env.get("SITEBUILD_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Attach a basic stderr handler; only entrypoints should call this."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
