from .detect_node import detect_package_manager, resolve_build_command

__all__ = ["detect_package_manager", "resolve_build_command"]
