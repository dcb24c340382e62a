from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Tuple

BUILD_MARKER = {"SST": "1"}

# (standard name seen by the build tooling, prefixed name we read it from)
CREDENTIAL_VARS: List[Tuple[str, str]] = [
    ("AWS_ACCESS_KEY_ID", "SST_AWS_ACCESS_KEY_ID"),
    ("AWS_SESSION_TOKEN", "SST_AWS_SESSION_TOKEN"),
    ("AWS_SECRET_ACCESS_KEY", "SST_AWS_SECRET_ACCESS_KEY"),
    ("AWS_REGION", "SST_AWS_REGION"),
]

EnvLayer = Mapping[str, Optional[str]]


def credential_layer(base: Mapping[str, str]) -> Dict[str, Optional[str]]:
    """Expose SST_AWS_* credentials under their standard AWS names."""
    return {target: base.get(source) for target, source in CREDENTIAL_VARS}


def merge_env(layers: List[EnvLayer]) -> Dict[str, str]:
    """
    Fold env layers left to right, later layers winning.

    A None value removes the key, so an unset SST_AWS_* credential hides
    the standard variable instead of leaking the caller's own.
    """
    merged: Dict[str, str] = {}
    for layer in layers:
        for key, value in layer.items():
            if value is None:
                merged.pop(key, None)
            else:
                merged[key] = str(value)
    return merged


def build_env_layers(
    base: Mapping[str, str],
    overrides: Optional[Mapping[str, str]],
    link_env: Mapping[str, str],
) -> List[EnvLayer]:
    """Precedence: base -> build marker -> credentials -> caller overrides -> link data."""
    return [
        base,
        BUILD_MARKER,
        credential_layer(base),
        overrides or {},
        link_env,
    ]
