"""Git command-line backend for status queries and index mutations.

Parses ``git status --porcelain=v1 -z`` into a ``StatusSnapshot`` and wraps
the stage/unstage/reset plumbing. Failures raise ``GitError`` so the UI can
decide whether they are fatal (startup) or transient (mid-session).
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from .rows import CATEGORY_INDEX, CATEGORY_UNTRACKED, CATEGORY_WORKSPACE
from .store import StatusSnapshot

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 30.0

_INDEX_LABELS: dict[str, str] = {
    "A": "new file",
    "M": "modified",
    "D": "deleted",
    "R": "renamed",
    "C": "copied",
    "T": "typechange",
}
_WORKSPACE_LABELS: dict[str, str] = {
    "M": "modified",
    "D": "deleted",
    "R": "renamed",
    "T": "typechange",
    "A": "new file",
}
_UNMERGED_CODES = {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}
UNMERGED_LABEL = "unmerged"


class GitError(Exception):
    """A git invocation failed."""

    def __init__(self, message: str, command: tuple[str, ...] = (), stderr: str = "") -> None:
        super().__init__(message)
        self.command = command
        self.stderr = stderr


class RepositoryOpenError(GitError):
    """The target path is not inside a git work tree."""


class BareRepositoryError(GitError):
    """The target repository has no work tree to report on."""


def _iter_porcelain_records(output: str) -> list[tuple[str, str]]:
    records: list[tuple[str, str]] = []
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if not token:
            continue
        if len(token) < 4 or token[2] != " ":
            continue

        status = token[:2]
        path_text = token[3:]
        records.append((status, path_text))

        # Renamed/copied records carry the source path as an extra token;
        # the first path token is the destination.
        if "R" in status or "C" in status:
            index += 1

    return records


def parse_porcelain_status(output: str) -> StatusSnapshot:
    """Split porcelain v1 ``-z`` output into index, workspace and untracked."""
    index: list[tuple[str, str]] = []
    workspace: list[tuple[str, str]] = []
    untracked: list[str] = []
    for status, path in _iter_porcelain_records(output):
        if status == "!!":
            continue
        if status == "??":
            untracked.append(path)
            continue
        if status in _UNMERGED_CODES:
            workspace.append((path, UNMERGED_LABEL))
            continue
        index_label = _INDEX_LABELS.get(status[0])
        if index_label is not None:
            index.append((path, index_label))
        workspace_label = _WORKSPACE_LABELS.get(status[1])
        if workspace_label is not None:
            workspace.append((path, workspace_label))
    return StatusSnapshot(
        index=tuple(index),
        workspace=tuple(workspace),
        untracked=tuple(untracked),
    )


class GitBackend:
    """Status and mutation operations bound to one repository work tree."""

    def __init__(self, repo_root: Path, timeout_seconds: float = GIT_TIMEOUT_SECONDS) -> None:
        self.repo_root = repo_root
        self.timeout_seconds = timeout_seconds

    @classmethod
    def open(cls, path: Path, timeout_seconds: float = GIT_TIMEOUT_SECONDS) -> GitBackend:
        """Resolve the work tree containing ``path``.

        Raises ``RepositoryOpenError`` when ``path`` is not in a repository
        and ``BareRepositoryError`` for bare repositories.
        """
        target = path.resolve()
        if not target.is_dir():
            raise RepositoryOpenError(f"could not open repository: {path}")
        try:
            proc = subprocess.run(
                ["git", "-C", str(target), "rev-parse", "--is-bare-repository"],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=timeout_seconds,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            raise RepositoryOpenError(f"could not run git: {exc}") from exc
        if proc.returncode != 0:
            raise RepositoryOpenError(
                f"could not open repository: {path}",
                stderr=proc.stderr.strip(),
            )
        if proc.stdout.strip() == "true":
            raise BareRepositoryError(f"could not report status on bare repository: {path}")

        backend = cls(target, timeout_seconds)
        toplevel = backend._run_git(["rev-parse", "--show-toplevel"]).strip()
        if not toplevel:
            raise RepositoryOpenError(f"could not open repository: {path}")
        backend.repo_root = Path(toplevel).resolve()
        return backend

    def _run_git(self, args: list[str]) -> str:
        command = ("git", "-C", str(self.repo_root), *args)
        logger.debug("running %s", " ".join(command))
        try:
            proc = subprocess.run(
                list(command),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=self.timeout_seconds,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            raise GitError(f"git {args[0]} failed: {exc}", command=command) from exc
        if proc.returncode != 0:
            stderr = proc.stderr.strip()
            detail = stderr.splitlines()[-1] if stderr else f"exit status {proc.returncode}"
            raise GitError(f"git {args[0]} failed: {detail}", command=command, stderr=stderr)
        return proc.stdout

    def has_head(self) -> bool:
        try:
            self._run_git(["rev-parse", "--verify", "-q", "HEAD"])
        except GitError:
            return False
        return True

    def query_status(self) -> StatusSnapshot:
        output = self._run_git(["status", "--porcelain=v1", "-z", "--untracked-files=normal"])
        snapshot = parse_porcelain_status(output)
        logger.debug(
            "status: %d index, %d workspace, %d untracked",
            len(snapshot.index),
            len(snapshot.workspace),
            len(snapshot.untracked),
        )
        return snapshot

    def stage(self, path: str) -> None:
        self._run_git(["add", "-A", "--", path])

    def unstage_from_index(self, path: str) -> None:
        """Reset ``path`` in the index to HEAD (or drop it before the first commit)."""
        if self.has_head():
            self._run_git(["reset", "-q", "HEAD", "--", path])
        else:
            self._run_git(["rm", "--cached", "-q", "-r", "--", path])

    def unstage_from_workspace(self, path: str, deleted: bool = False) -> None:
        """Remove ``path`` from the index; a workspace deletion is restored instead."""
        if deleted:
            self._run_git(["checkout", "--", path])
        else:
            self._run_git(["rm", "--cached", "-q", "--", path])

    def delete_untracked(self, path: str) -> None:
        target = self.repo_root / path
        logger.debug("deleting untracked %s", target)
        try:
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            elif target.exists() or target.is_symlink():
                target.unlink()
        except OSError as exc:
            raise GitError(f"could not delete {path}: {exc.strerror or exc}") from exc

    def checkout(self, path: str, category: str = CATEGORY_WORKSPACE) -> None:
        """Discard changes to ``path``; index entries are restored from HEAD."""
        if category == CATEGORY_INDEX:
            self._run_git(["checkout", "HEAD", "--", path])
        else:
            self._run_git(["checkout", "--", path])


def diff_command(path: str, category: str) -> list[str]:
    """Return the ``git diff`` argv showing the change of one row."""
    if category == CATEGORY_INDEX:
        return ["git", "diff", "--cached", "--", path]
    if category == CATEGORY_UNTRACKED:
        return ["git", "diff", "--no-index", "--", "/dev/null", path]
    return ["git", "diff", "--", path]


def interactive_stage_command(path: str) -> list[str]:
    return ["git", "add", "-p", "--", path]


def commit_command(amend: bool = False) -> list[str]:
    return ["git", "commit", "--amend"] if amend else ["git", "commit"]


def push_command(set_upstream: bool = False) -> list[str]:
    if set_upstream:
        return ["git", "push", "--set-upstream", "origin", "HEAD"]
    return ["git", "push"]


__all__ = [
    "GIT_TIMEOUT_SECONDS",
    "UNMERGED_LABEL",
    "GitError",
    "RepositoryOpenError",
    "BareRepositoryError",
    "GitBackend",
    "parse_porcelain_status",
    "diff_command",
    "interactive_stage_command",
    "commit_command",
    "push_command",
]
