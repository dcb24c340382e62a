from __future__ import annotations

import re
from typing import Dict, Mapping

TOKENISH = re.compile(r"(?i)(secret|token|password|apikey|api_key|access_key)")
HEX_LONG = re.compile(r"\b[0-9a-f]{32,}\b", re.I)


def redact_string(s: str) -> str:
    if TOKENISH.search(s) or HEX_LONG.search(s):
        return "[REDACTED]"
    return s


def redact_env(env: Mapping[str, str]) -> Dict[str, str]:
    """Redact values whose key or content looks like a credential."""
    return {k: "[REDACTED]" if TOKENISH.search(k) else redact_string(v) for k, v in env.items()}
