"""
An MkDocs plugin that injects script/stylesheet tags, the git revision and
conditional blocks into every rendered page.

Example `mkdocs.yml`::

    plugins:
      - html_inject:
          js: site_assets/js/*.js
          css: site_assets/css
          ignore: site_assets/
          etag: true
          remove: env:production
"""

import logging
import subprocess
from typing import Optional

from mkdocs.config import config_options as c
from mkdocs.config.defaults import MkDocsConfig
from mkdocs.exceptions import PluginError
from mkdocs.plugins import BasePlugin
from mkdocs.structure.pages import Page

from . import engine
from .config import DEFAULT_ETAG_ALGORITHM, InjectConfig
from .errors import HtmlInjectError
from .pipeline import build_fragments

# Use MkDocs' recommended plugin logger namespace so debug logs appear only with `--verbose`.
logger = logging.getLogger("mkdocs.plugins.html_inject")


class HtmlInjectPlugin(BasePlugin):
    """Apply the html-inject passes to each page after it is rendered.

    Configuration options (all optional):
    - js / css (str): File, directory or glob pattern of assets, relative to
      where `mkdocs` is run.
    - ignore (str): Prefix stripped from the start of each injected path.
    - etag (bool): Append `?etag=<digest>` computed from file content.
    - etag_algorithm (str): hashlib algorithm name for `etag`.
    - git_hash (bool): Replace `<!-- inject:git-hash -->` with the revision.
    - remove (str): `key` or `scope:key` of `<!-- remove:key -->` blocks to strip.
    - debug (bool): Extra debug logging.
    """

    config_scheme = (
        ('js',             c.Type(str, default='')),
        ('css',            c.Type(str, default='')),
        ('ignore',         c.Type(str, default='')),
        ('remove',         c.Type(str, default='')),
        ('etag',           c.Type(bool, default=False)),
        ('etag_algorithm', c.Type(str, default=DEFAULT_ETAG_ALGORITHM)),
        ('git_hash',       c.Type(bool, default=False)),
        ('debug',          c.Type(bool, default=False)),
    )

    def __init__(self):
        super().__init__()
        self.inject_config: Optional[InjectConfig] = None
        self.fragments: Optional[engine.Fragments] = None

    def _dbg(self, msg: str, *args) -> None:
        if not self.config.get("debug", False):
            return
        logger.debug("[html_inject] " + msg, *args)

    def _build_inject_config(self) -> InjectConfig:
        try:
            return InjectConfig.from_options(
                css=self.config.get("css"),
                js=self.config.get("js"),
                remove=self.config.get("remove"),
                ignore=self.config.get("ignore"),
                git_hash=self.config.get("git_hash"),
                etag=self.config.get("etag"),
                etag_algorithm=self.config.get("etag_algorithm"),
            )
        except ValueError as e:
            raise PluginError(f"[html_inject] {e}")

    def on_config(self, config: MkDocsConfig) -> MkDocsConfig:
        self.inject_config = self._build_inject_config()
        self._dbg("config %s", self.inject_config)
        return config

    def on_pre_build(self, config: MkDocsConfig) -> None:
        """Resolve assets once per build so `mkdocs serve` picks up changed files."""
        if self.inject_config is None:
            self.inject_config = self._build_inject_config()

        try:
            self.fragments = build_fragments(self.inject_config)
        except (HtmlInjectError, OSError, subprocess.SubprocessError) as e:
            raise PluginError(f"[html_inject] {e}")

        self._dbg(
            "fragments js=%s css=%s git_hash=%s",
            self.fragments.js is not None,
            self.fragments.css is not None,
            self.fragments.git_hash,
        )

    def on_post_page(self, output: str, *, page: Page, config: MkDocsConfig) -> Optional[str]:
        if self.fragments is None:
            return output
        result = engine.apply(output, self.fragments, self.inject_config.remove)
        if result != output:
            self._dbg("injected into %s", getattr(getattr(page, "file", None), "src_path", page))
        return result
