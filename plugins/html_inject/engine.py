"""
Marker-based substitution over a single HTML document.

Injection regions look like::

    <!-- inject:js -->
    ...replaced...
    <!-- endinject -->

Only the text between the markers is replaced; the markers stay, so the
document can be processed again. Regions are found with a non-greedy match
from the opening marker to the nearest `<!-- endinject -->`. Markers do not
nest and are not validated: two kinds sharing `endinject` are told apart by
pass order and textual proximity only.
"""

import re
from dataclasses import dataclass
from typing import Optional

from .config import RemovalCondition

JS_MARKER = "<!-- inject:js -->"
CSS_MARKER = "<!-- inject:css -->"
APPHASHES_MARKER = "<!-- inject:apphashes -->"
GIT_HASH_MARKER = "<!-- inject:git-hash -->"
END_INJECT = "<!-- endinject -->"

REMOVE_MARKER = "<!-- remove:{key} -->"
END_REMOVE = "<!-- endremove -->"


@dataclass(frozen=True)
class Fragments:
    """Replacement values for one run; `None` leaves a region untouched."""

    js: Optional[str] = None
    css: Optional[str] = None
    apphashes: Optional[str] = None
    git_hash: Optional[str] = None


def _region_re(opening: str, closing: str) -> "re.Pattern[str]":
    return re.compile(f"({re.escape(opening)})([\\s\\S]*?)({re.escape(closing)})")


def inject_region(document: str, marker: str, value: Optional[str]) -> str:
    """Replace the content of every `marker` ... `endinject` region with `value`."""

    def replace(match: "re.Match[str]") -> str:
        if value is None:
            return match.group(0)
        return match.group(1) + value + match.group(3)

    return _region_re(marker, END_INJECT).sub(replace, document)


def inject_marker(document: str, marker: str, value: Optional[str]) -> str:
    """Replace a single (unpaired) marker with `value`."""
    if value is None:
        return document
    return document.replace(marker, value)


def remove_blocks(document: str, key: str) -> str:
    """Delete every `remove:<key>` ... `endremove` block, markers included."""
    opening = REMOVE_MARKER.format(key=key)
    return _region_re(opening, END_REMOVE).sub("", document)


def apply(document: str, fragments: Fragments, removal: RemovalCondition) -> str:
    """Run all passes over `document` in their fixed order.

    Removal runs last so removal blocks may wrap injection regions.
    """
    document = inject_region(document, JS_MARKER, fragments.js)
    document = inject_region(document, CSS_MARKER, fragments.css)
    document = inject_region(document, APPHASHES_MARKER, fragments.apphashes)
    document = inject_marker(document, GIT_HASH_MARKER, fragments.git_hash)
    return remove_blocks(document, removal.key)
