from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Generator, Iterable, Optional, Tuple


def match_glob(rel: str, pattern: str) -> bool:
    """fnmatch with a leading "**/" also matching files at the top level."""
    if fnmatch.fnmatch(rel, pattern):
        return True
    return pattern.startswith("**/") and fnmatch.fnmatch(rel, pattern[3:])


def match_any(rel: str, patterns: Iterable[str]) -> bool:
    return any(match_glob(rel, pat) for pat in patterns)


def iter_files(root: str | Path) -> Generator[Tuple[Path, str], None, None]:
    """Yield (absolute path, posix path relative to root) for every file, in a stable order."""
    root_path = Path(root).resolve()
    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames.sort()
        for filename in sorted(filenames):
            p = Path(dirpath) / filename
            yield p, p.relative_to(root_path).as_posix()


def read_text(path: str | Path) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def exists_any(roots: Iterable[Optional[str | Path]], name: str) -> bool:
    """True when `name` exists directly under any of the given roots (None entries skipped)."""
    return any((Path(root) / name).exists() for root in roots if root is not None)
