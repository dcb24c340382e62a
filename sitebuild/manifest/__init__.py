from .command import DEFAULT_CACHE_POLICY_ALLOWED_HEADERS, DEFAULT_OPEN_NEXT_VERSION, normalize_build_command
from .loader import load_build_id, load_build_metadata, load_open_next_output, load_prerender_manifest
from .models import BuildMetadata, DeploymentManifest, PrerenderManifest, S3Origin

__all__ = [
    "BuildMetadata",
    "DEFAULT_CACHE_POLICY_ALLOWED_HEADERS",
    "DEFAULT_OPEN_NEXT_VERSION",
    "DeploymentManifest",
    "PrerenderManifest",
    "S3Origin",
    "load_build_id",
    "load_build_metadata",
    "load_open_next_output",
    "load_prerender_manifest",
    "normalize_build_command",
]
