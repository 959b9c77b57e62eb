"""Import resolver — map raw module specifiers to package names."""

from __future__ import annotations

from depaudit.models import ImportReference

# Node.js ``require("module").builtinModules`` (exact names, matched exactly).
NODE_BUILTIN_MODULES: frozenset[str] = frozenset(
    {
        "_http_agent",
        "_http_client",
        "_http_common",
        "_http_incoming",
        "_http_outgoing",
        "_http_server",
        "_stream_duplex",
        "_stream_passthrough",
        "_stream_readable",
        "_stream_transform",
        "_stream_wrap",
        "_stream_writable",
        "_tls_common",
        "_tls_wrap",
        "assert",
        "assert/strict",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "diagnostics_channel",
        "dns",
        "dns/promises",
        "domain",
        "events",
        "fs",
        "fs/promises",
        "http",
        "http2",
        "https",
        "inspector",
        "inspector/promises",
        "module",
        "net",
        "os",
        "path",
        "path/posix",
        "path/win32",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "readline/promises",
        "repl",
        "stream",
        "stream/consumers",
        "stream/promises",
        "stream/web",
        "string_decoder",
        "sys",
        "timers",
        "timers/promises",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "util/types",
        "v8",
        "vm",
        "wasi",
        "worker_threads",
        "zlib",
    }
)

# "node:fs", "node:test", ... always name a built-in.
_NODE_SCHEME = "node:"


def is_builtin_module(raw_path: str) -> bool:
    return raw_path in NODE_BUILTIN_MODULES or raw_path.startswith(_NODE_SCHEME)


def resolve_package_name(raw_path: str) -> str | None:
    """Return the package a module specifier belongs to, or None.

    ``lodash/pick`` -> ``lodash``; ``@scope/pkg/sub`` -> ``@scope/pkg``.
    Relative/absolute paths and built-in modules resolve to None, as does a
    scope with no package segment.
    """
    if not raw_path or raw_path.startswith((".", "/")):
        return None
    if is_builtin_module(raw_path):
        return None

    segments = raw_path.split("/")
    if segments[0].startswith("@"):
        if len(segments) < 2 or not segments[0][1:] or not segments[1]:
            return None
        return f"{segments[0]}/{segments[1]}"
    return segments[0] or None


def resolve_reference(ref: ImportReference) -> str | None:
    return resolve_package_name(ref.raw_path)
