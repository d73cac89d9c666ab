import logging
import subprocess
from typing import Optional

from .errors import RevisionLookupError

log = logging.getLogger("mkdocs.plugins.html_inject")

GIT_REVISION_CMD = ["git", "rev-parse", "HEAD"]


def current_revision(cwd: Optional[str] = None) -> str:
    """Return the commit id of the checked out git revision."""
    try:
        result = subprocess.run(
            GIT_REVISION_CMD,
            cwd=cwd,
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise RevisionLookupError(f"git is not available: {e}") from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise RevisionLookupError(f"'{' '.join(GIT_REVISION_CMD)}' failed: {stderr}") from e

    revision = result.stdout.strip()
    log.debug("[html_inject] git revision %s", revision)
    return revision


def render_revision(revision: str) -> str:
    return f"<!-- {revision} -->"
