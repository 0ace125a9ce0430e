"""Real-repository scenarios for status queries and index mutations."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path

from lazystage.git_backend import BareRepositoryError, GitBackend, RepositoryOpenError
from lazystage.rows import CATEGORY_WORKSPACE


@unittest.skipIf(shutil.which("git") is None, "git is required for git backend tests")
class GitBackendTests(unittest.TestCase):
    def _init_repo(self, root: Path) -> None:
        subprocess.run(["git", "init", "-q"], cwd=root, check=True)
        subprocess.run(["git", "config", "user.email", "tests@example.com"], cwd=root, check=True)
        subprocess.run(["git", "config", "user.name", "Tests"], cwd=root, check=True)

    def _commit_all(self, root: Path) -> None:
        subprocess.run(["git", "add", "-A"], cwd=root, check=True)
        subprocess.run(["git", "commit", "-q", "-m", "init"], cwd=root, check=True)

    def test_status_groups_index_workspace_and_untracked(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self._init_repo(root)
            (root / "tracked.txt").write_text("one\n", encoding="utf-8")
            self._commit_all(root)
            (root / "tracked.txt").write_text("two\n", encoding="utf-8")
            (root / "staged.txt").write_text("new\n", encoding="utf-8")
            subprocess.run(["git", "add", "staged.txt"], cwd=root, check=True)
            (root / "notes.txt").write_text("scratch\n", encoding="utf-8")

            snapshot = GitBackend.open(root).query_status()

        self.assertEqual(snapshot.index, (("staged.txt", "new file"),))
        self.assertEqual(snapshot.workspace, (("tracked.txt", "modified"),))
        self.assertEqual(snapshot.untracked, ("notes.txt",))

    def test_open_from_subdirectory_resolves_top_level(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self._init_repo(root)
            nested = root / "src" / "pkg"
            nested.mkdir(parents=True)

            backend = GitBackend.open(nested)

        self.assertEqual(backend.repo_root, root)

    def test_open_missing_path_fails(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(RepositoryOpenError):
                GitBackend.open(Path(tmp) / "missing")

    def test_open_bare_repository_fails(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            bare = Path(tmp).resolve() / "bare.git"
            subprocess.run(["git", "init", "-q", "--bare", str(bare)], check=True)

            with self.assertRaises(BareRepositoryError):
                GitBackend.open(bare)

    def test_stage_unstage_and_checkout_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self._init_repo(root)
            (root / "a.txt").write_text("one\n", encoding="utf-8")
            self._commit_all(root)
            (root / "a.txt").write_text("two\n", encoding="utf-8")
            backend = GitBackend.open(root)

            backend.stage("a.txt")
            staged = backend.query_status()
            backend.unstage_from_index("a.txt")
            unstaged = backend.query_status()
            backend.checkout("a.txt", CATEGORY_WORKSPACE)
            clean = backend.query_status()
            content = (root / "a.txt").read_text(encoding="utf-8")

        self.assertEqual(staged.index, (("a.txt", "modified"),))
        self.assertEqual(staged.workspace, ())
        self.assertEqual(unstaged.workspace, (("a.txt", "modified"),))
        self.assertEqual(clean.entry_count, 0)
        self.assertEqual(content, "one\n")

    def test_unstage_before_first_commit_keeps_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self._init_repo(root)
            (root / "first.txt").write_text("hello\n", encoding="utf-8")
            backend = GitBackend.open(root)
            backend.stage("first.txt")
            self.assertFalse(backend.has_head())

            backend.unstage_from_index("first.txt")
            snapshot = backend.query_status()
            still_there = (root / "first.txt").exists()

        self.assertEqual(snapshot.index, ())
        self.assertEqual(snapshot.untracked, ("first.txt",))
        self.assertTrue(still_there)

    def test_delete_untracked_file_and_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self._init_repo(root)
            (root / "junk.txt").write_text("x\n", encoding="utf-8")
            (root / "out").mkdir()
            (root / "out" / "log.txt").write_text("x\n", encoding="utf-8")
            backend = GitBackend.open(root)

            untracked = backend.query_status().untracked
            for path in untracked:
                backend.delete_untracked(path)
            remaining = backend.query_status()

        self.assertEqual(set(untracked), {"junk.txt", "out/"})
        self.assertEqual(remaining.entry_count, 0)


if __name__ == "__main__":
    unittest.main()
