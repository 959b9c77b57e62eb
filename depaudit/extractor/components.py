"""Script block extraction for single-file components (.vue, .svelte)."""

from __future__ import annotations

import re
from dataclasses import dataclass

_SCRIPT_RE = re.compile(
    r"<script\b(?P<attrs>[^>]*)>(?P<body>.*?)</script\s*>",
    re.IGNORECASE | re.DOTALL,
)
_LANG_RE = re.compile(r"""\blang\s*=\s*["']?([\w-]+)""", re.IGNORECASE)


@dataclass
class ScriptBlock:
    body: str
    lang: str | None
    line_offset: int  # 0-based line of the first body character


def script_blocks(text: str) -> list[ScriptBlock]:
    """Return every ``<script>`` block in document order."""
    blocks: list[ScriptBlock] = []
    for m in _SCRIPT_RE.finditer(text):
        lang_match = _LANG_RE.search(m.group("attrs"))
        blocks.append(
            ScriptBlock(
                body=m.group("body"),
                lang=lang_match.group(1) if lang_match else None,
                line_offset=text.count("\n", 0, m.start("body")),
            )
        )
    return blocks
