"""
Tests for asset resolution, cache-busting and tag rendering.
"""

import hashlib
import os

import pytest

from plugins.html_inject.assets import (
    AssetKind,
    AssetReference,
    cache_bust,
    extract_hashes,
    file_digest,
    render_apphashes,
    render_block,
    render_tag,
    render_tags,
    resolve_assets,
    strip_prefix,
)
from plugins.html_inject.errors import AssetPathNotFoundError


@pytest.fixture
def assets_dir(tmp_path):
    js = tmp_path / "assets" / "js"
    js.mkdir(parents=True)
    (js / "vendor.js").write_text("var v;", encoding="utf8")
    (js / "app.1a2b3c.js").write_text("var a;", encoding="utf8")
    (js / "notes.txt").write_text("skip", encoding="utf8")
    (js / "nested.js").mkdir()
    css = tmp_path / "assets" / "css"
    css.mkdir()
    (css / "main.css").write_text("body{}", encoding="utf8")
    (css / "theme.css").write_text("a{}", encoding="utf8")
    return tmp_path / "assets"


class TestResolveAssets:
    """Test for resolving files, directories and glob patterns."""

    def test_directory_keeps_matching_extension_in_lexical_order(self, assets_dir):
        """Test: Directory listing keeps only entries with the kind's extension."""
        js_dir = str(assets_dir / "js")
        refs = resolve_assets(js_dir, AssetKind.SCRIPT)
        assert [os.path.basename(r.path) for r in refs] == ["app.1a2b3c.js", "nested.js", "vendor.js"]
        assert all(r.kind is AssetKind.SCRIPT for r in refs)

    def test_directory_for_stylesheets(self, assets_dir):
        """Test: Stylesheet directories keep only .css entries."""
        refs = resolve_assets(str(assets_dir / "css"), AssetKind.STYLESHEET)
        assert [os.path.basename(r.path) for r in refs] == ["main.css", "theme.css"]

    def test_single_file(self, assets_dir):
        """Test: A file resolves to itself, whatever its extension."""
        path = str(assets_dir / "js" / "notes.txt")
        refs = resolve_assets(path, AssetKind.SCRIPT)
        assert [r.path for r in refs] == [path]

    def test_glob_is_expanded_sorted(self, assets_dir):
        """Test: Glob patterns expand to matching paths in sorted order."""
        refs = resolve_assets(str(assets_dir / "*" / "*.css"), AssetKind.STYLESHEET)
        assert [os.path.basename(r.path) for r in refs] == ["main.css", "theme.css"]

    def test_glob_without_match_fails(self, assets_dir):
        """Test: A glob matching nothing is an error."""
        with pytest.raises(AssetPathNotFoundError):
            resolve_assets(str(assets_dir / "*.scss"), AssetKind.STYLESHEET)

    def test_missing_path_fails(self, tmp_path):
        """Test: A path that is neither file, directory nor glob is an error."""
        with pytest.raises(AssetPathNotFoundError) as excinfo:
            resolve_assets(str(tmp_path / "missing"), AssetKind.SCRIPT)
        assert "missing" in str(excinfo.value)

    def test_ignore_prefix_is_stripped_from_href(self, assets_dir):
        """Test: The configured prefix never reaches the emitted href."""
        prefix = str(assets_dir) + os.sep
        refs = resolve_assets(str(assets_dir / "css"), AssetKind.STYLESHEET, ignore=prefix)
        assert [r.href for r in refs] == [os.path.join("css", "main.css"), os.path.join("css", "theme.css")]
        assert all(r.path.startswith(prefix) for r in refs)


class TestStripPrefix:
    """Test for removing the configured path prefix."""

    def test_strips_leading_prefix(self):
        """Test: A leading prefix is removed."""
        assert strip_prefix("/assets/app.js", "/assets/") == "app.js"

    def test_only_strips_at_start(self):
        """Test: The prefix is not removed from the middle of a path."""
        assert strip_prefix("dist/assets/app.js", "/assets/") == "dist/assets/app.js"
        assert strip_prefix("/assets/x/assets/app.js", "/assets/") == "x/assets/app.js"

    def test_no_prefix(self):
        """Test: An unset prefix leaves the path as is."""
        assert strip_prefix("/assets/app.js", None) == "/assets/app.js"
        assert strip_prefix("/assets/app.js", "") == "/assets/app.js"


class TestCacheBust:
    """Test for content-digest cache-busting."""

    def test_disabled_returns_href(self, tmp_path):
        """Test: Without etag the file is not read."""
        ref = AssetReference(path=str(tmp_path / "absent.js"), href="absent.js", kind=AssetKind.SCRIPT)
        assert cache_bust(ref, etag=False, algorithm="md5") == "absent.js"

    def test_digest_of_content(self, tmp_path):
        """Test: The etag is the hex digest of the file content."""
        path = tmp_path / "app.js"
        path.write_bytes(b"x")
        ref = AssetReference(path=str(path), href="app.js", kind=AssetKind.SCRIPT)

        expected = hashlib.md5(b"x").hexdigest()
        assert cache_bust(ref, etag=True, algorithm="md5") == f"app.js?etag={expected}"
        # Deterministic for unchanged content.
        assert cache_bust(ref, etag=True, algorithm="md5") == f"app.js?etag={expected}"

        path.write_bytes(b"y")
        assert cache_bust(ref, etag=True, algorithm="md5") == f"app.js?etag={hashlib.md5(b'y').hexdigest()}"

    def test_other_algorithm(self, tmp_path):
        """Test: Other hashlib algorithms can be used."""
        path = tmp_path / "app.css"
        path.write_bytes(b"body{}")
        assert file_digest(str(path), "sha256") == hashlib.sha256(b"body{}").hexdigest()

    def test_unreadable_file_propagates(self, tmp_path):
        """Test: A missing file raises OSError."""
        ref = AssetReference(path=str(tmp_path / "gone.js"), href="gone.js", kind=AssetKind.SCRIPT)
        with pytest.raises(OSError):
            cache_bust(ref, etag=True, algorithm="md5")


class TestRendering:
    """Test for script/stylesheet tag rendering."""

    def test_render_tag(self):
        """Test: Script and stylesheet tag formats."""
        assert render_tag("app.js", AssetKind.SCRIPT) == '<script src="app.js"></script>'
        assert render_tag("app.css", AssetKind.STYLESHEET) == '<link rel="stylesheet" href="app.css">'

    def test_render_tags_keeps_order(self, tmp_path):
        """Test: Tags follow the reference order."""
        refs = [
            AssetReference(path="b.js", href="b.js", kind=AssetKind.SCRIPT),
            AssetReference(path="a.js", href="a.js", kind=AssetKind.SCRIPT),
        ]
        assert render_tags(refs, etag=False, algorithm="md5") == [
            '<script src="b.js"></script>',
            '<script src="a.js"></script>',
        ]

    def test_render_block(self):
        """Test: One tab-indented line per tag, ending on a fresh indented line."""
        assert render_block(["A", "B"]) == "\n\tA\n\tB\n\t"
        assert render_block([]) == "\n\t"


class TestAppHashes:
    """Test for the apphashes version table."""

    def test_extracts_versioned_scripts_only(self):
        """Test: Only `name.version.js` lines produce entries, in order."""
        lines = [
            '<script src="js/app.1a2b3c.js"></script>',
            '<script src="js/vendor.js"></script>',
            '<script src="js/lib.v2.js?etag=abc"></script>',
        ]
        assert extract_hashes(lines) == [("app", "1a2b3c"), ("lib", "v2")]

    def test_duplicates_are_kept(self):
        """Test: Repeated names produce repeated entries."""
        lines = ['<script src="a.1.js"></script>', '<script src="a.2.js"></script>']
        assert extract_hashes(lines) == [("a", "1"), ("a", "2")]

    def test_multi_dot_uses_first_match(self):
        """Test: `app.min.v2.js` yields the narrowest first match."""
        assert extract_hashes(['<script src="app.min.v2.js"></script>']) == [("min", "v2")]

    def test_render_apphashes(self):
        """Test: Entries are wrapped in the inline script."""
        out = render_apphashes([("app", "1a"), ("lib", "v2")])
        assert out == (
            "<script>\n"
            "    var apphashes = {\n"
            '    "app":"1a",\n'
            '"lib":"v2"\n'
            "    }\n"
            "</script>"
        )

    def test_render_apphashes_empty(self):
        """Test: No entries still gives the inline script."""
        assert render_apphashes([]) == "<script>\n    var apphashes = {\n    \n    }\n</script>"
