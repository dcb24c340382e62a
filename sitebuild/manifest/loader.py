"""
Load OpenNext build output from a site's output directory.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from ..errors import ConfigurationError
from .models import BuildMetadata, DeploymentManifest, PrerenderManifest

logger = logging.getLogger(__name__)

OPEN_NEXT_OUTPUT = Path(".open-next") / "open-next.output.json"
BUILD_ID = Path(".next") / "BUILD_ID"
PRERENDER_MANIFEST = Path(".next") / "prerender-manifest.json"

# open-next.output.json reports initializationFunction as
# ".open-next/initialization-function"; the real bundle is the dynamodb provider.
INITIALIZATION_FUNCTION_FIX = {
    "handler": "index.handler",
    "bundle": ".open-next/dynamodb-provider",
}


def _patch_initialization_function(data: Any) -> None:
    if not isinstance(data, dict):
        return
    props = data.get("additionalProps")
    if isinstance(props, dict) and props.get("initializationFunction") is not None:
        props["initializationFunction"] = dict(INITIALIZATION_FUNCTION_FIX)


def load_open_next_output(output_path: str | Path) -> DeploymentManifest:
    """
    Read and normalize .open-next/open-next.output.json.

    Args:
        output_path: Site build output root

    Returns:
        DeploymentManifest

    Raises:
        ConfigurationError: If the descriptor file does not exist
        json.JSONDecodeError: If the descriptor is not valid JSON
        pydantic.ValidationError: If the descriptor has the wrong shape
    """
    path = Path(output_path) / OPEN_NEXT_OUTPUT
    if not path.exists():
        raise ConfigurationError(f'Failed to load open-next.output.json from "{path}".')

    data = json.loads(path.read_text(encoding="utf-8"))
    _patch_initialization_function(data)
    return DeploymentManifest.model_validate(data)


def load_build_id(output_path: str | Path, name: str) -> str:
    try:
        return (Path(output_path) / BUILD_ID).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read build id: {e}")
        raise ConfigurationError(
            f'Failed to read build id from ".next/BUILD_ID" for the "{name}" site.'
        ) from e


def load_prerender_manifest(output_path: str | Path) -> Optional[PrerenderManifest]:
    """Prerender data is advisory; any failure yields None."""
    try:
        content = (Path(output_path) / PRERENDER_MANIFEST).read_text(encoding="utf-8")
        return PrerenderManifest.model_validate(json.loads(content))
    except (OSError, ValueError) as e:
        logger.debug(f"Failed to load prerender-manifest.json: {e}")
        return None


def load_build_metadata(output_path: str | Path, name: str) -> BuildMetadata:
    return BuildMetadata(
        build_id=load_build_id(output_path, name),
        prerender_manifest=load_prerender_manifest(output_path),
    )
