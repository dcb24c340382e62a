"""
Work out the object key and response headers for each static asset.
"""

import logging
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from .analyzer.walk import iter_files, match_any
from .content_type import get_content_type
from .errors import ConfigurationError
from .manifest.models import CopyEntry, S3Origin

logger = logging.getLogger(__name__)

TextEncoding = Literal["utf-8", "iso-8859-1", "windows-1252", "ascii", "none"]

VERSIONED_FILES_CACHE_HEADER = "public,max-age=31536000,immutable"
NON_VERSIONED_FILES_CACHE_HEADER = "public,max-age=0,s-maxage=86400,stale-while-revalidate=8640"


class FileOption(BaseModel):
    """Header overrides for files matching a glob."""
    files: Union[str, List[str]]
    ignore: Optional[Union[str, List[str]]] = None
    content_type: Optional[str] = None
    cache_control: Optional[str] = None

    def matches(self, rel: str) -> bool:
        files = [self.files] if isinstance(self.files, str) else self.files
        ignore = [self.ignore] if isinstance(self.ignore, str) else (self.ignore or [])
        return match_any(rel, files) and not match_any(rel, ignore)


class AssetOptions(BaseModel):
    text_encoding: TextEncoding = "utf-8"
    versioned_files_cache_header: str = VERSIONED_FILES_CACHE_HEADER
    non_versioned_files_cache_header: str = NON_VERSIONED_FILES_CACHE_HEADER
    file_options: List[FileOption] = Field(default_factory=list)


@dataclass
class AssetFile:
    source: Path
    key: str
    content_type: str
    cache_control: str


def _is_versioned(entry: CopyEntry, rel: str) -> bool:
    if not entry.cached or not entry.versioned_sub_dir:
        return False
    sub = entry.versioned_sub_dir.strip("/")
    return rel == sub or rel.startswith(sub + "/")


def _plan_entry(output_path: Path, entry: CopyEntry, options: AssetOptions) -> List[AssetFile]:
    src_root = output_path / entry.from_
    if not src_root.is_dir():
        raise ConfigurationError(f'Asset directory "{src_root}" does not exist.')

    planned: List[AssetFile] = []
    for path, rel in iter_files(src_root):
        content_type = get_content_type(rel, options.text_encoding)
        cache_control = (
            options.versioned_files_cache_header
            if _is_versioned(entry, rel)
            else options.non_versioned_files_cache_header
        )
        for option in options.file_options:
            if not option.matches(rel):
                continue
            content_type = option.content_type or content_type
            cache_control = option.cache_control or cache_control

        planned.append(AssetFile(
            source=path,
            key=posixpath.join(entry.to, rel).lstrip("/"),
            content_type=content_type,
            cache_control=cache_control,
        ))
    return planned


def plan_assets(output_path: Union[str, Path], origin: S3Origin, options: Optional[AssetOptions] = None) -> List[AssetFile]:
    """
    List every file the s3 origin's copy entries would upload, with headers.

    Args:
        output_path: Site build output root
        origin: The manifest's s3 origin
        options: Header options, defaults when omitted

    Returns:
        AssetFile per file, in copy-entry then path order
    """
    options = options or AssetOptions()
    root = Path(output_path)
    planned: List[AssetFile] = []
    for entry in origin.copy_entries:
        files = _plan_entry(root, entry, options)
        logger.debug(f"Planned {len(files)} assets from {entry.from_} to {entry.to}")
        planned.extend(files)
    return planned
