"""
README section splicing and recovery.

The report lives between two literal markers in the README. Everything
outside the markers is left byte-for-byte as it was.
"""

import logging
import os
import subprocess
from typing import List, Optional, Tuple

from .errors import DocumentAccessError

logger = logging.getLogger("activity-readme.document")

START_MARKER = "<!--START_SECTION:waka-->"
END_MARKER = "<!--END_SECTION:waka-->"

PLACEHOLDER = (
    "# Hello\n"
    "\n"
    "<!-- METRICS:START -->\n"
    "<p><em>Loading metrics…</em></p>\n"
    "<!-- METRICS:END -->\n"
    "\n"
    f"{START_MARKER}\n"
    "<p><em>Loading WakaTime…</em></p>\n"
    f"{END_MARKER}\n"
)

GIT_TIMEOUT = 60


def splice_section(document: str, start: str, end: str, replacement: str) -> Tuple[str, bool]:
    """
    Replace the first ``start``..``end`` region of ``document``.

    The region, markers included, becomes ``start``, the replacement and
    ``end`` on their own lines.

    Returns:
        (new document, whether a region was found and the text changed)
    """
    begin = document.find(start)
    if begin == -1:
        return document, False
    finish = document.find(end, begin + len(start))
    if finish == -1:
        return document, False
    finish += len(end)

    updated = f"{document[:begin]}{start}\n{replacement}\n{end}{document[finish:]}"
    return updated, updated != document


def recovery_refs(branch: Optional[str]) -> List[str]:
    """Git refs tried, in order, when the document is missing."""
    refs = ["HEAD"]
    if branch:
        refs.append(f"origin/{branch}")
    for fallback in ("origin/main", "origin/master"):
        if fallback not in refs:
            refs.append(fallback)
    return refs


def git_show(ref: str, path: str) -> Optional[str]:
    """Content of ``path`` at ``ref``, or None when git cannot produce it."""
    directory = os.path.dirname(os.path.abspath(path))
    spec = f"{ref}:./{os.path.basename(path)}"
    try:
        result = subprocess.run(
            ["git", "show", spec],
            cwd=directory,
            capture_output=True,
            timeout=GIT_TIMEOUT,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
        logger.debug("git show %s failed: %s", spec, e)
        return None
    if result.returncode != 0:
        logger.debug("git show %s failed: %s", spec, result.stderr.decode("utf-8", "replace").strip()[:200])
        return None
    try:
        content = result.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.debug("git show %s returned non UTF-8 content: %s", spec, e)
        return None
    return content or None


def write_text(path: str, content: str) -> None:
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except (OSError, UnicodeError) as e:
        raise DocumentAccessError(f"Cannot write {path}: {e}") from e


def read_text(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeError) as e:
        raise DocumentAccessError(f"Cannot read {path}: {e}") from e


def ensure_document(path: str, branch: Optional[str] = None) -> str:
    """
    Make sure the document exists on disk.

    A missing file is restored from git history (HEAD, then the CI branch,
    then origin/main and origin/master). If none of those has it, a
    placeholder holding the section markers is written instead.

    Returns:
        Where the document came from: "working tree", the git ref, or "placeholder".

    Raises:
        DocumentAccessError: If the restored or placeholder file cannot be written.
    """
    if os.path.exists(path):
        logger.debug("%s exists", path)
        return "working tree"
    logger.info("%s not found in working directory", path)

    for ref in recovery_refs(branch):
        content = git_show(ref, path)
        if content:
            write_text(path, content)
            logger.info("%s restored from git %s", path, ref)
            return ref

    logger.warning("%s could not be found in working dir nor in git history. Creating placeholder", path)
    write_text(path, PLACEHOLDER)
    return "placeholder"


def update_document(path: str, block: str, start: str = START_MARKER, end: str = END_MARKER) -> bool:
    """
    Splice ``block`` into the document at ``path``.

    The file is only rewritten when its content changes.

    Returns:
        True if the document was updated.
    """
    original = read_text(path)
    updated, changed = splice_section(original, start, end, block)
    if changed:
        write_text(path, updated)
    return changed
