"""Syntax-tree extractor: collect import references from one source file.

Each file is parsed with tree-sitter using the grammar its dialect selects,
then walked for the node kinds that load a module:

* ``import_statement`` / ``export_statement`` with a ``source`` string
* ``import_require_clause`` (TypeScript ``import x = require("y")``)
* ``call_expression`` whose callee is ``require`` or ``import``, either with a
  string first argument or tagged with a substitution-free template string

References whose module path is not a literal are skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from tree_sitter import Node

from depaudit.extractor.components import script_blocks
from depaudit.extractor.dialects import dialect_for, grammar_for_lang, make_parser
from depaudit.models import FileAnalysisError, ImportKind, ImportReference

log = structlog.get_logger("depaudit.extractor")

# ``import`x` `` is not valid syntax, so only require`x` reaches the template branch
# in practice; a file using it fails to parse as a whole.
_LOADER_NAMES = ("require", "import")

_ESCAPE_RE = re.compile(
    r"\\(?:x([0-9A-Fa-f]{2})|u\{([0-9A-Fa-f]+)\}|u([0-9A-Fa-f]{4})|(\r\n|\n|\r)|(.))",
    re.DOTALL,
)
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}


@dataclass
class Extraction:
    """References found in one file, or the error that stopped extraction."""

    file: str
    references: list[ImportReference] = field(default_factory=list)
    error: FileAnalysisError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def analyze_file(project_root: Path, rel_path: str) -> Extraction:
    """Read ``project_root / rel_path`` and extract its references."""
    try:
        source = (Path(project_root) / rel_path).read_bytes()
        source.decode("utf-8")  # undecodable files are read failures
    except OSError as e:
        return Extraction(
            file=rel_path,
            error=FileAnalysisError(rel_path, f"read failed: {e.strerror or e}"),
        )
    except UnicodeDecodeError:
        return Extraction(
            file=rel_path,
            error=FileAnalysisError(rel_path, "read failed: not valid UTF-8"),
        )
    return extract_references(source, rel_path)


def extract_references(source: str | bytes, file_path: str) -> Extraction:
    """Parse *source* in the dialect chosen by *file_path*'s extension."""
    if isinstance(source, str):
        source = source.encode("utf-8")

    dialect = dialect_for(file_path)
    if not dialect.container:
        return _extract_chunk(source, file_path, dialect.grammar, line_offset=0)

    text = source.decode("utf-8", errors="replace")
    result = Extraction(file=file_path)
    for block in script_blocks(text):
        chunk = _extract_chunk(
            block.body.encode("utf-8"),
            file_path,
            grammar_for_lang(block.lang),
            line_offset=block.line_offset,
        )
        if chunk.error is not None:
            return chunk
        result.references.extend(chunk.references)
    return result


def _extract_chunk(
    source: bytes, file_path: str, grammar: str, line_offset: int
) -> Extraction:
    tree = make_parser(grammar).parse(source)
    root = tree.root_node
    if root.has_error:
        message = _describe_syntax_error(root, line_offset)
        log.debug("extractor.parse_failed", file=file_path, error=message)
        return Extraction(file=file_path, error=FileAnalysisError(file_path, message))

    refs = [
        ImportReference(raw_path=raw, origin_file=file_path, kind=kind)
        for raw, kind in _collect(root)
    ]
    return Extraction(file=file_path, references=refs)


def _walk(root: Node):
    """Pre-order traversal without recursion."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _collect(root: Node) -> list[tuple[str, ImportKind]]:
    found: list[tuple[str, ImportKind]] = []
    for node in _walk(root):
        kind = node.type
        if kind in ("import_statement", "export_statement"):
            raw = _string_value(node.child_by_field_name("source"))
            if raw is not None:
                found.append((raw, ImportKind.STATIC))
        elif kind == "import_require_clause":
            raw = _string_value(node.child_by_field_name("source"))
            if raw is not None:
                found.append((raw, ImportKind.REQUIRE))
        elif kind == "call_expression":
            hit = _loader_call(node)
            if hit is not None:
                found.append(hit)
    return found


def _loader_call(node: Node) -> tuple[str, ImportKind] | None:
    callee = node.child_by_field_name("function")
    args = node.child_by_field_name("arguments")
    if callee is None or args is None:
        return None

    if callee.type == "import":
        name = "import"
    elif callee.type == "identifier":
        name = _text(callee)
    else:
        return None
    if name not in _LOADER_NAMES:
        return None

    # require`pkg` / import`pkg`
    if args.type == "template_string":
        raw = _template_value(args)
        return (raw, ImportKind.TEMPLATE_LITERAL) if raw is not None else None

    first = _first_argument(args)
    raw = _string_value(first)
    if raw is None:
        return None
    return raw, (ImportKind.REQUIRE if name == "require" else ImportKind.DYNAMIC)


def _first_argument(args: Node) -> Node | None:
    for child in args.named_children:
        if child.type != "comment":
            return child
    return None


def _string_value(node: Node | None) -> str | None:
    if node is None or node.type != "string":
        return None
    return _unescape(_text(node)[1:-1])


def _template_value(node: Node) -> str | None:
    """Raw template text; escapes are left as written."""
    if any(child.type == "template_substitution" for child in node.children):
        return None
    return _text(node)[1:-1]


def _text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace")


def _unescape(raw: str) -> str:
    """Interpret JS escape sequences in a literal body (quotes already removed)."""

    def replace(m: re.Match) -> str:
        hex2, code_point, hex4, newline, char = m.groups()
        if hex2 or hex4:
            return chr(int(hex2 or hex4, 16))
        if code_point:
            value = int(code_point, 16)
            return chr(value) if value <= 0x10FFFF else m.group(0)
        if newline:
            return ""  # line continuation
        return _SIMPLE_ESCAPES.get(char, char)

    return _ESCAPE_RE.sub(replace, raw) if "\\" in raw else raw


def _describe_syntax_error(root: Node, line_offset: int) -> str:
    for node in _walk(root):
        if node.type == "ERROR" or node.is_missing:
            row, col = node.start_point[0], node.start_point[1]
            what = f"missing {node.type}" if node.is_missing else "unexpected token"
            return f"syntax error ({what}) at line {row + line_offset + 1}, column {col + 1}"
    return "syntax error"
