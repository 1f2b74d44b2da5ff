"""Git synchronisation of the workspace.

Every saved record is committed and pushed from the workspace root:

    git add .  ->  git status --porcelain  ->  git commit -m <msg>  ->  git push

Failures raise SyncError; callers decide whether a failed push matters.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from selvit.workspace import DEFAULT_SYNC_TIMEOUT, workspace_root

logger = logging.getLogger(__name__)


class SyncError(Exception):
    """A git step failed, timed out, or there was nothing to commit."""


def new_input_message(name: str) -> str:
    return f"add new input: {name}"


def update_input_message(name: str) -> str:
    return f"update input: {name}"


def log_message(input_name: str, unit_name: str, quantity: int) -> str:
    return f"logging {quantity} {unit_name} for {input_name}"


def _git(root: Path, *args: str, timeout: int) -> subprocess.CompletedProcess[str]:
    command = ["git", "-C", str(root), *args]
    try:
        proc = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise SyncError(f"git {args[0]} timed out after {timeout}s") from e
    except OSError as e:
        raise SyncError(f"git {args[0]} could not run: {e}") from e

    if proc.returncode != 0:
        logger.debug("git %s stderr: %s", args[0], proc.stderr[:4096])
        raise SyncError(f"git {args[0]} failed (exit {proc.returncode})")
    return proc


def push_changes(message: str, root: Path | None = None, timeout: int = DEFAULT_SYNC_TIMEOUT) -> None:
    """Stage everything under root, commit with `message` and push."""
    if root is None:
        root = workspace_root()

    _git(root, "add", ".", timeout=timeout)
    status = _git(root, "status", "--porcelain", timeout=timeout)
    if not status.stdout.strip():
        raise SyncError("nothing to commit")
    _git(root, "commit", "-m", message, timeout=timeout)
    _git(root, "push", timeout=timeout)
    logger.info("Pushed: %s", message)
