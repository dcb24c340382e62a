"""
Run a site's build command under the global build limiter.
"""

import asyncio
import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .analyzer import resolve_build_command
from .config import Settings
from .envman import build_env_layers, build_link_env, merge_env, redact_env, resolve_links
from .envman.links import LinkResolver, default_link_resolver
from .errors import BuildError
from .limiter import BuildLimiter, get_limiter

logger = logging.getLogger(__name__)


@dataclass
class BuildRequest:
    """One site build invocation."""
    name: str                               # site display name, used in messages
    site_path: str
    build_command: Optional[str] = None     # overrides lockfile detection
    environment: Optional[Dict[str, str]] = None
    links: List[Any] = field(default_factory=list)


def _run_command(cmd: str, cwd: str, env: Dict[str, str]) -> None:
    # stdout/stderr are inherited so the build's output shows up as-is
    subprocess.run(cmd, shell=True, cwd=cwd, env=env, check=True)


async def build_app(
    request: BuildRequest,
    *,
    settings: Optional[Settings] = None,
    limiter: Optional[BuildLimiter] = None,
    link_resolver: LinkResolver = default_link_resolver,
) -> str:
    """
    Build a site and return its path.

    Args:
        request: What to build
        settings: Runtime settings, read from the environment when omitted
        limiter: Concurrency limiter, the process-wide one when omitted
        link_resolver: Turns link references into Link objects

    Returns:
        The unchanged site path

    Raises:
        ConfigurationError: If no build command can be resolved
        BuildError: If the build command fails or cannot be started
    """
    settings = settings or Settings.from_env()
    if settings.skip or settings.dev:
        logger.debug(f"Skipping build for {request.name}")
        return request.site_path

    cmd = resolve_build_command(request.site_path, request.build_command, settings.workspace_root)

    links = await resolve_links(request.links, link_resolver)
    link_env = build_link_env(links, settings.app_name, settings.stage)
    env = merge_env(build_env_layers(os.environ, request.environment, link_env))

    limiter = limiter or get_limiter(settings)
    async with limiter.acquire(f"build for {request.name}"):
        logger.debug(f'running "{cmd}" script for {request.name}')
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Injected env: {redact_env({**(request.environment or {}), **link_env})}")
        try:
            await asyncio.to_thread(_run_command, cmd, request.site_path, env)
        except (subprocess.CalledProcessError, OSError) as e:
            raise BuildError(f'There was a problem building "{request.name}".') from e

    return request.site_path
