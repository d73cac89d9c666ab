"""
Asset resolution and tag rendering for injected script/stylesheet lists.

Resolve a file, directory or glob pattern to an ordered list of assets,
optionally cache-bust them with a digest of their content, render them as
HTML tags and derive the `apphashes` table from versioned script names.
"""

import glob
import hashlib
import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .errors import AssetPathNotFoundError

log = logging.getLogger("mkdocs.plugins.html_inject")

# Characters that make an asset spec a glob pattern rather than a path.
GLOB_CHARS = re.compile(r"[*?\[]")

# `name.version.js` anywhere in a rendered script tag; first match wins.
VERSIONED_SCRIPT_RE = re.compile(r"(\w+)\.([a-zA-Z0-9]+)\.js")

APPHASHES_TEMPLATE = """<script>
    var apphashes = {{
    {entries}
    }}
</script>"""


class AssetKind(Enum):
    SCRIPT = "script"
    STYLESHEET = "stylesheet"

    @property
    def extension(self) -> str:
        return ".js" if self is AssetKind.SCRIPT else ".css"


@dataclass(frozen=True)
class AssetReference:
    """An asset on disk and the href it is emitted under."""

    path: str
    href: str
    kind: AssetKind


def strip_prefix(path: str, prefix: Optional[str]) -> str:
    """Remove `prefix` from the start of `path` only."""
    if prefix and path.startswith(prefix):
        return path[len(prefix):]
    return path


def _expand(spec: str, kind: AssetKind) -> List[str]:
    if GLOB_CHARS.search(spec):
        matches = sorted(glob.glob(spec, recursive=True))
        if not matches:
            raise AssetPathNotFoundError(spec)
        return matches

    if os.path.isdir(spec):
        return [
            os.path.join(spec, name)
            for name in sorted(os.listdir(spec))
            if name.endswith(kind.extension)
        ]

    if os.path.isfile(spec):
        return [spec]

    raise AssetPathNotFoundError(spec)


def resolve_assets(spec: str, kind: AssetKind, ignore: Optional[str] = None) -> List[AssetReference]:
    """Resolve an asset spec to references in resolver order."""
    paths = _expand(spec, kind)
    log.debug("[html_inject] %s resolved to %d %s asset(s)", spec, len(paths), kind.value)
    return [AssetReference(path=p, href=strip_prefix(p, ignore), kind=kind) for p in paths]


def file_digest(path: str, algorithm: str) -> str:
    with open(path, "rb") as f:
        return hashlib.new(algorithm, f.read()).hexdigest()


def cache_bust(reference: AssetReference, etag: bool, algorithm: str) -> str:
    """Return the href, with `?etag=<digest>` appended when `etag` is set.

    The digest is taken from the file on disk at call time, so changing the
    file changes the token on the next run.
    """
    if not etag:
        return reference.href
    return f"{reference.href}?etag={file_digest(reference.path, algorithm)}"


def render_tag(href: str, kind: AssetKind) -> str:
    if kind is AssetKind.SCRIPT:
        return f'<script src="{href}"></script>'
    return f'<link rel="stylesheet" href="{href}">'


def render_tags(references: Iterable[AssetReference], etag: bool, algorithm: str) -> List[str]:
    return [render_tag(cache_bust(ref, etag, algorithm), ref.kind) for ref in references]


def render_block(lines: Iterable[str]) -> str:
    """Lay out tag lines for an injection region.

    Every tag gets its own tab-indented line and the block ends with a
    newline+tab so the closing marker keeps its indentation.
    """
    return "".join(f"\n\t{line}" for line in lines) + "\n\t"


def extract_hashes(lines: Iterable[str]) -> List[Tuple[str, str]]:
    """Return `(name, version)` for each line naming a `name.version.js` file."""
    entries = []
    for line in lines:
        match = VERSIONED_SCRIPT_RE.search(line)
        if match:
            entries.append((match.group(1), match.group(2)))
    return entries


def render_apphashes(entries: Iterable[Tuple[str, str]]) -> str:
    body = ",\n".join(f'"{name}":"{version}"' for name, version in entries)
    return APPHASHES_TEMPLATE.format(entries=body)
