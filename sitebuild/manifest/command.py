"""
Compose the command that runs OpenNext itself.
"""

import asyncio
import inspect
from typing import Awaitable, List, Optional, TypeVar, Union

T = TypeVar("T")

DEFAULT_OPEN_NEXT_VERSION = "3.0.6"
DEFAULT_CACHE_POLICY_ALLOWED_HEADERS: List[str] = ["x-open-next-cache-key"]

Deferred = Union[T, Awaitable[T], None]


async def _resolve(value: Deferred[T]) -> Optional[T]:
    if inspect.isawaitable(value):
        return await value
    return value


async def normalize_build_command(
    build_command: Deferred[str] = None,
    open_next_version: Deferred[str] = None,
) -> str:
    """
    Resolve the OpenNext build command once both inputs are known.

    Either input may be a plain value, None, or an awaitable that is still
    pending. Schedule the coroutine as a task to avoid waiting on it.

    Returns:
        The user's command, or ``npx --yes open-next@<version> build``
    """
    command, version = await asyncio.gather(_resolve(build_command), _resolve(open_next_version))
    if command is not None:
        return command
    if version is None:
        version = DEFAULT_OPEN_NEXT_VERSION
    return " ".join(["npx", "--yes", f"open-next@{version}", "build"])
