"""
Whole-buffer run: read the input once, apply every pass, write once.
"""

import logging
import os
from typing import Optional

from . import engine
from .assets import AssetKind, extract_hashes, render_apphashes, render_block, render_tags, resolve_assets
from .config import InjectConfig
from .errors import InputIsDirectoryError, InputNotFoundError, MissingInputError
from .revision import current_revision, render_revision

log = logging.getLogger("mkdocs.plugins.html_inject")


def build_fragments(config: InjectConfig, cwd: Optional[str] = None) -> engine.Fragments:
    """Resolve assets and the revision into the values injected by the engine."""
    js = css = apphashes = git_hash = None

    if config.js:
        refs = resolve_assets(config.js, AssetKind.SCRIPT, config.ignore)
        lines = render_tags(refs, config.etag, config.etag_algorithm)
        js = render_block(lines)
        apphashes = render_apphashes(extract_hashes(lines))

    if config.css:
        refs = resolve_assets(config.css, AssetKind.STYLESHEET, config.ignore)
        css = render_block(render_tags(refs, config.etag, config.etag_algorithm))

    if config.git_hash:
        git_hash = render_revision(current_revision(cwd))

    return engine.Fragments(js=js, css=css, apphashes=apphashes, git_hash=git_hash)


def read_document(config: InjectConfig) -> str:
    if not config.input:
        raise MissingInputError()
    if os.path.isdir(config.input):
        raise InputIsDirectoryError(config.input)
    if not os.path.isfile(config.input):
        raise InputNotFoundError(config.input)
    # newline="" keeps line endings and surrogateescape keeps non UTF-8 bytes untouched.
    with open(config.input, encoding="utf-8", errors="surrogateescape", newline="") as f:
        return f.read()


def run(config: InjectConfig) -> str:
    """Inject into `config.input` and write the result; returns the output path.

    Nothing is written if any step fails.
    """
    document = read_document(config)
    fragments = build_fragments(config)
    result = engine.apply(document, fragments, config.remove)

    output = config.output_path
    with open(output, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
        f.write(result)
    log.debug("[html_inject] wrote %d characters to %s", len(result), output)
    return output
