"""
campus/git.py -- Last-modified timestamps from git history.

Resource pages show when their source file last changed.  The timestamp
comes from the newest commit touching the file; anything that prevents
asking git (no binary, not a repository, untracked file) yields ``None``.
"""

import logging
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

_GIT_TIMEOUT_SECONDS = 10


def get_last_updated_timestamp(path) -> str | None:
    """Return the ISO 8601 committer date of the last commit touching *path*."""
    git = shutil.which("git")
    if git is None:
        logger.debug("git is not installed; skipping timestamp for %s", path)
        return None

    path = Path(path)
    try:
        result = subprocess.run(
            [git, "log", "-1", "--format=%cI", "--", path.name],
            cwd=str(path.parent),
            capture_output=True,
            text=True,
            timeout=_GIT_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.warning("Could not read git history for %s: %s", path, exc)
        return None

    if result.returncode != 0:
        logger.debug("git log failed for %s: %s", path, result.stderr.strip())
        return None
    return result.stdout.strip() or None
