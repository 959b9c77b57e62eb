"""Dialect registry — map file extensions to tree-sitter grammars."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import PurePath

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language, Parser

# Grammar names understood by load_language().
JAVASCRIPT = "javascript"  # also covers JSX
TYPESCRIPT = "typescript"
TSX = "tsx"


@dataclass(frozen=True)
class Dialect:
    """How to parse one family of source files.

    ``container`` dialects (.vue, .svelte) hold their code in ``<script>``
    blocks; each block is parsed with the grammar picked from its ``lang``
    attribute instead of ``grammar``.
    """

    name: str
    extensions: tuple[str, ...]
    grammar: str
    container: bool = False


DIALECT_REGISTRY: dict[str, Dialect] = {}


def register_dialect(dialect: Dialect) -> None:
    """Register *dialect* under each of its extensions."""
    for ext in dialect.extensions:
        DIALECT_REGISTRY[ext] = dialect


SCRIPT = Dialect("script", (".js", ".mjs", ".cjs"), JAVASCRIPT)
JSX = Dialect("jsx", (".jsx",), JAVASCRIPT)
TYPESCRIPT_DIALECT = Dialect("typescript", (".ts", ".mts", ".cts"), TYPESCRIPT)
TSX_DIALECT = Dialect("tsx", (".tsx",), TSX)
COMPONENT = Dialect("component", (".vue", ".svelte"), JAVASCRIPT, container=True)

for _d in (SCRIPT, JSX, TYPESCRIPT_DIALECT, TSX_DIALECT, COMPONENT):
    register_dialect(_d)


def dialect_for(file_path: str) -> Dialect:
    """Pick the dialect for *file_path*; unknown extensions parse as plain script."""
    return DIALECT_REGISTRY.get(PurePath(file_path).suffix.lower(), SCRIPT)


def grammar_for_lang(lang: str | None) -> str:
    """Grammar for a ``<script lang="...">`` attribute value."""
    lang = (lang or "").lower()
    if lang in ("ts", "typescript"):
        return TYPESCRIPT
    if lang == "tsx":
        return TSX
    return JAVASCRIPT


@lru_cache(maxsize=None)
def load_language(grammar: str) -> Language:
    if grammar == JAVASCRIPT:
        return Language(tsjs.language())
    if grammar == TYPESCRIPT:
        return Language(tsts.language_typescript())
    if grammar == TSX:
        return Language(tsts.language_tsx())
    raise ValueError(f"unknown grammar: {grammar}")


def make_parser(grammar: str) -> Parser:
    return Parser(load_language(grammar))
