import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fs_mirror.errors import ErrorKind
from fs_mirror.node import FsNode, NodeKind, contains, iter_nodes


def make_dir(name, path, *children):
    node = FsNode(name, path, NodeKind.DIRECTORY)
    node.children.extend(children)
    return node


class TestFsNode(unittest.TestCase):
    def test_missing_path_uses_sentinel_metadata(self):
        """Stale metadata is tolerated: no exception, size 0, no mtime."""
        node = FsNode("ghost.txt", Path("/nonexistent/ghost.txt"))
        self.assertEqual(node.size, 0)
        self.assertIsNone(node.modified_time)

    def test_update_info_reads_size_and_mtime(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "data.txt"
            path.write_text("hello")
            node = FsNode("data.txt", path)
            self.assertEqual(node.size, 5)
            self.assertIsNotNone(node.modified_time)

            path.write_text("hello world")
            node.update_info()
            self.assertEqual(node.size, 11)

            path.unlink()
            node.update_info()
            self.assertEqual(node.size, 0)
            self.assertIsNone(node.modified_time)

    def test_directory_size_is_zero(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            node = FsNode("root", tmpdir, NodeKind.DIRECTORY)
            self.assertEqual(node.size, 0)
            self.assertIsNotNone(node.modified_time)

    def test_file_node_rejects_children(self):
        parent = FsNode("a.txt", Path("/x/a.txt"))
        child = FsNode("b.txt", Path("/x/b.txt"))
        with patch("fs_mirror.node.print_error") as mock_error:
            result = parent.add_child(child)
        self.assertFalse(result)
        self.assertEqual(result.error, ErrorKind.NOT_A_DIRECTORY)
        self.assertEqual(parent.children, [])
        mock_error.assert_called_once()

    def test_directory_accepts_children(self):
        parent = FsNode("dir", Path("/x/dir"), NodeKind.DIRECTORY)
        child = FsNode("b.txt", Path("/x/dir/b.txt"))
        self.assertTrue(parent.add_child(child))
        self.assertIs(parent.children[0], child)

    def test_kind_is_read_only(self):
        node = FsNode("a.txt", Path("/x/a.txt"))
        with self.assertRaises(AttributeError):
            node.kind = NodeKind.DIRECTORY

    def test_identity_not_value_equality(self):
        a = FsNode("same", Path("/x/same"))
        b = FsNode("same", Path("/x/same"))
        self.assertNotEqual(a, b)
        parent = make_dir("x", Path("/x"), a)
        self.assertTrue(parent.has_child(a))
        self.assertFalse(parent.has_child(b))
        self.assertFalse(parent.remove_child(b))
        self.assertTrue(parent.remove_child(a))
        self.assertEqual(parent.children, [])

    def test_rebase_updates_descendant_paths(self):
        leaf = FsNode("leaf.txt", Path("/old/sub/inner/leaf.txt"))
        inner = make_dir("inner", Path("/old/sub/inner"), leaf)
        sub = make_dir("sub", Path("/old/sub"), inner)

        sub.rebase(Path("/new/sub"))

        self.assertEqual(sub.path, Path("/new/sub"))
        self.assertEqual(inner.path, Path("/new/sub/inner"))
        self.assertEqual(leaf.path, Path("/new/sub/inner/leaf.txt"))


class TestIterNodes(unittest.TestCase):
    def test_preorder(self):
        c = FsNode("c", Path("/r/a/c"))
        a = make_dir("a", Path("/r/a"), c)
        b = FsNode("b", Path("/r/b"))
        root = make_dir("r", Path("/r"), a, b)

        self.assertEqual([n.name for n in iter_nodes(root)], ["r", "a", "c", "b"])

    def test_none_yields_nothing(self):
        self.assertEqual(list(iter_nodes(None)), [])

    def test_contains(self):
        c = FsNode("c", Path("/r/a/c"))
        a = make_dir("a", Path("/r/a"), c)
        root = make_dir("r", Path("/r"), a)
        self.assertTrue(contains(root, c))
        self.assertTrue(contains(a, a))
        self.assertFalse(contains(a, root))


if __name__ == "__main__":
    unittest.main()
