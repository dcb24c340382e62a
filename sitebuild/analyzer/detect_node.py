from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from ..errors import ConfigurationError
from .walk import exists_any, read_text

logger = logging.getLogger(__name__)

# Checked in order; the first lockfile found at the site or workspace root wins
LOCKFILES: List[Tuple[str, str]] = [
    ("yarn.lock", "yarn"),
    ("pnpm-lock.yaml", "pnpm"),
    ("bun.lockb", "bun"),
]
DEFAULT_PACKAGE_MANAGER = "npm"


def _read_package_json(site_path: str | Path) -> dict:
    pj = Path(site_path) / "package.json"
    if not pj.exists():
        raise ConfigurationError(f'No package.json found at "{site_path}".')
    return json.loads(read_text(pj) or "{}")


def detect_package_manager(site_path: str | Path, workspace_root: Optional[str | Path] = None) -> str:
    """Pick the package manager from lockfile presence alone."""
    roots = (site_path, workspace_root)
    for lockfile, manager in LOCKFILES:
        if exists_any(roots, lockfile):
            logger.debug(f"Found {lockfile} for {site_path}, using {manager}")
            return manager
    return DEFAULT_PACKAGE_MANAGER


def resolve_build_command(
    site_path: str | Path,
    user_command: Optional[str] = None,
    workspace_root: Optional[str | Path] = None,
) -> str:
    """
    Decide which shell command builds the site.

    Args:
        site_path: Site source directory
        user_command: Explicit command, returned unchanged when given
        workspace_root: Monorepo root that may hold the lockfile

    Returns:
        Shell command string

    Raises:
        ConfigurationError: If package.json or its "build" script is missing
    """
    if user_command:
        return user_command

    pkg = _read_package_json(site_path)
    scripts = pkg.get("scripts") or {}
    if not scripts.get("build"):
        raise ConfigurationError(f'No "build" script found within package.json in "{site_path}".')

    manager = detect_package_manager(site_path, workspace_root)
    return f"{manager} run build"
