import inspect
import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fs_mirror.builder import build_tree
from fs_mirror.index import find_by_name
from fs_mirror.node import FsNode, NodeKind, iter_nodes


class TestBuilder(unittest.TestCase):
    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())
        (self.test_dir / "b" / "deep").mkdir(parents=True)
        (self.test_dir / "a.txt").write_text("alpha")
        (self.test_dir / "b" / "c.txt").write_text("gamma!")
        (self.test_dir / "b" / "deep" / "e.bin").write_bytes(b"\x00" * 10)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_builds_full_tree(self):
        root = build_tree(self.test_dir)

        self.assertIsNotNone(root)
        self.assertEqual(root.kind, NodeKind.DIRECTORY)
        self.assertEqual(root.path, self.test_dir)
        self.assertEqual(root.name, self.test_dir.name)
        self.assertEqual({child.name for child in root.children}, {"a.txt", "b"})

        c = find_by_name(root, "c.txt")
        self.assertEqual(c.path, root.path / "b" / "c.txt")
        self.assertEqual(c.kind, NodeKind.FILE)
        self.assertEqual(c.size, 6)
        self.assertEqual(find_by_name(root, "e.bin").size, 10)

        for node in iter_nodes(root):
            for child in node.children:
                self.assertEqual(child.path, node.path / child.name)

    def test_missing_path_returns_none(self):
        with patch("fs_mirror.builder.print_error") as mock_error:
            self.assertIsNone(build_tree(self.test_dir / "missing"))
        mock_error.assert_called_once()

    def test_file_path_builds_single_node(self):
        root = build_tree(self.test_dir / "a.txt")
        self.assertEqual(root.kind, NodeKind.FILE)
        self.assertEqual(root.children, [])
        self.assertEqual(root.size, 5)

    def test_relative_path_is_made_absolute(self):
        cwd = os.getcwd()
        try:
            os.chdir(self.test_dir)
            root = build_tree("b")
        finally:
            os.chdir(cwd)
        self.assertTrue(root.path.is_absolute())
        self.assertEqual(root.name, "b")

    def test_progress_callback_counts_every_node(self):
        calls = []
        root = build_tree(self.test_dir, progress_callback=lambda count, path: calls.append((count, path)))

        self.assertEqual(len(calls), len(list(iter_nodes(root))))
        self.assertEqual([count for count, _ in calls], list(range(1, len(calls) + 1)))

    def test_rebuild_produces_independent_tree(self):
        first = build_tree(self.test_dir)
        second = build_tree(self.test_dir)
        self.assertIsNot(first, second)
        self.assertIsNot(find_by_name(first, "c.txt"), find_by_name(second, "c.txt"))

    def test_bad_entry_is_skipped(self):
        """One failing entry must not abort the whole build."""
        (self.test_dir / "bad.txt").write_text("x")

        def flaky_node(name, path, kind=NodeKind.FILE):
            if name == "bad.txt":
                raise PermissionError(13, "Permission denied")
            return FsNode(name, path, kind)

        with patch("fs_mirror.builder.FsNode", side_effect=flaky_node), \
             patch("fs_mirror.builder.print_warning") as mock_warning:
            root = build_tree(self.test_dir)

        self.assertIsNone(find_by_name(root, "bad.txt"))
        self.assertIsNotNone(find_by_name(root, "a.txt"))
        self.assertIsNotNone(find_by_name(root, "c.txt"))
        mock_warning.assert_called_once()

    def test_unlistable_directory_is_kept_empty(self):
        real_scandir = os.scandir

        def guarded_scandir(path):
            if Path(path).name == "deep":
                raise PermissionError(13, "Permission denied")
            return real_scandir(path)

        with patch("fs_mirror.builder.os.scandir", side_effect=guarded_scandir), \
             patch("fs_mirror.builder.print_warning"):
            root = build_tree(self.test_dir)

        deep = find_by_name(root, "deep")
        self.assertEqual(deep.kind, NodeKind.DIRECTORY)
        self.assertEqual(deep.children, [])
        self.assertIsNotNone(find_by_name(root, "c.txt"))

    def test_deep_nesting_does_not_exhaust_the_stack(self):
        depth = 80
        leaf = self.test_dir.joinpath(*["d"] * depth)
        leaf.mkdir(parents=True)
        (leaf / "bottom.txt").write_text("x")

        # Leave far fewer free frames than there are nested directories
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(len(inspect.stack(0)) + 40)
        try:
            root = build_tree(self.test_dir)
        finally:
            sys.setrecursionlimit(limit)

        bottom = find_by_name(root, "bottom.txt")
        self.assertIsNotNone(bottom)
        self.assertEqual(bottom.path, leaf / "bottom.txt")
        self.assertEqual(sum(1 for node in iter_nodes(root) if node.name == "d"), depth)

    @unittest.skipIf(sys.platform.startswith("win"), "symlinks need extra privileges on Windows")
    def test_symlinked_directory_not_followed(self):
        os.symlink(self.test_dir / "b", self.test_dir / "link")
        root = build_tree(self.test_dir)

        link = find_by_name(root, "link")
        self.assertEqual(link.kind, NodeKind.FILE)
        self.assertEqual(link.children, [])


if __name__ == "__main__":
    unittest.main()
