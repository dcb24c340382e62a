from __future__ import annotations

import inspect
import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Union

RESOURCE_PREFIX = "SST_RESOURCE_"


@dataclass
class Link:
    """A linked resource's name and the properties exposed to the build."""
    name: str
    properties: Dict[str, Any] = field(default_factory=dict)


LinkResolver = Callable[[List[Any]], Union[Iterable[Link], Awaitable[Iterable[Link]]]]


def _to_link(ref: Any) -> Link:
    if isinstance(ref, Link):
        return ref
    if isinstance(ref, Mapping):
        return Link(name=ref["name"], properties=dict(ref.get("properties") or {}))
    raise TypeError(f"Cannot resolve link reference {ref!r}")


def default_link_resolver(links: List[Any]) -> List[Link]:
    """Accept Link objects or {name, properties} mappings."""
    return [_to_link(ref) for ref in links]


async def resolve_links(links: List[Any], resolver: LinkResolver = default_link_resolver) -> List[Link]:
    """Run the resolver, awaiting it when it hands back a coroutine."""
    result = resolver(links)
    if inspect.isawaitable(result):
        result = await result
    return [_to_link(item) for item in result]


def encode(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def build_link_env(links: Iterable[Link], app_name: str, stage: str) -> Dict[str, str]:
    """
    Build the SST_RESOURCE_* variables injected into a site build.

    Args:
        links: Resolved links
        app_name: Current app name
        stage: Current stage

    Returns:
        Mapping of env var name to JSON-encoded properties
    """
    envs: Dict[str, str] = {
        f"{RESOURCE_PREFIX}App": encode({"name": app_name, "stage": stage}),
    }
    for link in links:
        envs[f"{RESOURCE_PREFIX}{link.name}"] = encode(link.properties)
    return envs
