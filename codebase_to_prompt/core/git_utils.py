# codebase_to_prompt/core/git_utils.py
"""
utility functions for interacting with git repositories using subprocess.
"""
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple
import structlog

from codebase_to_prompt.exceptions import GitError

log = structlog.get_logger(__name__)

SHORT_HASH_LENGTH = 7


def _run_git_command(args: List[str], repo_path: Path) -> Tuple[bool, str, str]:
    """
    runs a git command via subprocess.
    returns a tuple: (success_flag, stdout_str, stderr_str).
    raises `GitError` when the git executable cannot be run at all.
    """
    command_parts = ["git"] + [str(arg) for arg in args]
    log.debug("executing_git_command", command=" ".join(command_parts), cwd=str(repo_path))
    try:
        process = subprocess.run(
            command_parts,
            capture_output=True,
            text=True,
            check=False,
            cwd=repo_path,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git executable not found on PATH")
    except OSError as e:
        raise GitError(f"failed to run git: {e}")

    stdout_content = (process.stdout or "").strip()
    stderr_content = (process.stderr or "").strip()
    if process.returncode != 0:
        log.debug(
            "git_command_failed",
            command=" ".join(command_parts),
            exit_code=process.returncode,
            stderr=stderr_content or "(empty)",
        )
    return process.returncode == 0, stdout_content, stderr_content


def get_short_commit_hash(repo_dir: Path) -> Optional[str]:
    """
    Returns the abbreviated hash of HEAD for the repository containing
    `repo_dir`, or None when it is not a repository, has no commits yet, or
    git is unavailable.
    """
    try:
        ok, stdout, stderr = _run_git_command(
            ["rev-parse", f"--short={SHORT_HASH_LENGTH}", "HEAD"], repo_dir
        )
    except GitError as e:
        log.warning("git_unavailable_cannot_append_hash", error=str(e))
        return None
    if not ok or not stdout:
        log.warning("not_a_git_repository_cannot_append_hash", directory=str(repo_dir), stderr=stderr)
        return None
    return stdout[:SHORT_HASH_LENGTH]
