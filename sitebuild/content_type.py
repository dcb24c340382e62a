"""
Content-Type resolution for static assets.
"""

import os
from typing import Dict, NamedTuple


class MimeEntry(NamedTuple):
    mime: str
    is_text: bool


DEFAULT_MIME = "application/octet-stream"
NO_CHARSET = "none"

# Apple/Android app association files are served without an extension
SITE_ASSOCIATION_SUFFIX = ".well-known/site-association-json"

EXTENSIONS: Dict[str, MimeEntry] = {
    ".txt": MimeEntry("text/plain", True),
    ".htm": MimeEntry("text/html", True),
    ".html": MimeEntry("text/html", True),
    ".xhtml": MimeEntry("application/xhtml+xml", True),
    ".css": MimeEntry("text/css", True),
    ".js": MimeEntry("text/javascript", True),
    ".mjs": MimeEntry("text/javascript", True),
    ".apng": MimeEntry("image/apng", False),
    ".avif": MimeEntry("image/avif", False),
    ".gif": MimeEntry("image/gif", False),
    ".jpeg": MimeEntry("image/jpeg", False),
    ".jpg": MimeEntry("image/jpeg", False),
    ".png": MimeEntry("image/png", False),
    ".svg": MimeEntry("image/svg+xml", True),
    ".bmp": MimeEntry("image/bmp", False),
    ".tiff": MimeEntry("image/tiff", False),
    ".webp": MimeEntry("image/webp", False),
    ".ico": MimeEntry("image/vnd.microsoft.icon", False),
    ".eot": MimeEntry("application/vnd.ms-fontobject", False),
    ".ttf": MimeEntry("font/ttf", False),
    ".otf": MimeEntry("font/otf", False),
    ".woff": MimeEntry("font/woff", False),
    ".woff2": MimeEntry("font/woff2", False),
    ".json": MimeEntry("application/json", True),
    ".jsonld": MimeEntry("application/ld+json", True),
    ".xml": MimeEntry("application/xml", True),
    ".pdf": MimeEntry("application/pdf", False),
    ".zip": MimeEntry("application/zip", False),
    ".wasm": MimeEntry("application/wasm", False),
    ".webmanifest": MimeEntry("application/manifest+json", True),
}


def get_content_type(filename: str, text_encoding: str) -> str:
    """
    Return the Content-Type header value for a file.

    Args:
        filename: File name or path of the asset
        text_encoding: Charset for text assets, or "none" to omit it

    Returns:
        MIME type, suffixed with ``;charset=...`` for text assets
    """
    if filename.endswith(SITE_ASSOCIATION_SUFFIX):
        ext = ".json"
    else:
        ext = os.path.splitext(filename)[1]

    entry = EXTENSIONS.get(ext)
    if entry is None:
        return DEFAULT_MIME

    if entry.is_text and text_encoding != NO_CHARSET:
        return f"{entry.mime};charset={text_encoding}"
    return entry.mime
