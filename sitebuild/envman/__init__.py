from .layers import build_env_layers, merge_env
from .links import Link, build_link_env, resolve_links
from .redact import redact_env

__all__ = ["Link", "build_env_layers", "build_link_env", "merge_env", "redact_env", "resolve_links"]
