from __future__ import annotations

import os
import random
import tempfile
import unittest
from pathlib import Path

from txtar import Archive, File, format_archive, parse, parse_file


SIMPLE_ARCHIVE = """\
comment1
comment2
-- file1 --
File 1 text.
-- foo ---
More file 1 text.
-- file 2 --
File 2 text.
-- empty --
-- noNL --
hello world
-- empty filename line --
some content
-- --"""

SIMPLE_FORMAT_OUTPUT = """\
comment1
comment2
-- file1 --
File 1 text.
-- foo ---
More file 1 text.
-- file 2 --
File 2 text.
-- empty --
-- noNL --
hello world
"""


def _random_text(rng: random.Random, n: int) -> str:
    alphabet = ["-", "-", "-", " ", " ", "\n", "\n", "a", "b", "\t", "\r", "é"]
    return "".join(rng.choice(alphabet) for _ in range(n))


class ParseTests(unittest.TestCase):
    def test_simple_parse(self):
        a = parse(SIMPLE_ARCHIVE)
        self.assertEqual(a.comment, "comment1\ncomment2\n")
        self.assertEqual(
            a.files,
            [
                File("file1", "File 1 text.\n-- foo ---\nMore file 1 text.\n"),
                File("file 2", "File 2 text.\n"),
                File("empty", ""),
                File("noNL", "hello world\n"),
                File("empty filename line", "some content\n"),
                File("", ""),
            ],
        )

    def test_ordering_and_lookup(self):
        a = parse("c\n-- a --\n1\n-- b --\n2\n")
        self.assertEqual(a.comment, "c\n")
        self.assertEqual([(f.name, f.content) for f in a], [("a", "1\n"), ("b", "2\n")])
        self.assertEqual(a.get("b"), File("b", "2\n"))
        self.assertIsNone(a.get("z"))

    def test_empty_file_and_empty_name(self):
        a = parse("-- --\n-- x --\nhi")
        self.assertEqual(a.comment, "")
        self.assertEqual(a.files, [File("", ""), File("x", "hi\n")])

    def test_no_trailing_newline(self):
        self.assertEqual(parse("-- x --\nhello")[0].content, "hello\n")

    def test_comment_only(self):
        a = parse("just a comment")
        self.assertEqual(a.comment, "just a comment\n")
        self.assertEqual(len(a), 0)

    def test_empty_input(self):
        self.assertEqual(parse(""), Archive())

    def test_name_stripping(self):
        a = parse("--   foo bar   --\nx\n")
        self.assertEqual(a.names(), ["foo bar"])

    def test_false_positive_marker_stays_in_content(self):
        a = parse("-- f --\nbefore\n-- foo ---\nafter\n")
        self.assertEqual(len(a), 1)
        self.assertEqual(a[0].content, "before\n-- foo ---\nafter\n")

    def test_duplicate_names_keep_order(self):
        a = parse("-- d --\nfirst\n-- d --\nsecond\n")
        self.assertEqual(len(a), 2)
        self.assertEqual(a.get("d").content, "first\n")
        self.assertEqual(a[1].content, "second\n")

    def test_crlf_marker_is_content(self):
        a = parse("-- a --\r\nx\r\n")
        self.assertEqual(a.comment, "-- a --\r\nx\r\n")
        self.assertEqual(len(a), 0)

    def test_bytes_input(self):
        a = parse("-- é --\nñ\n".encode("utf-8"))
        self.assertEqual(a.get("é").content, "ñ\n")
        with self.assertRaises(UnicodeDecodeError):
            parse(b"\xff\xfe")

    def test_totality_on_random_input(self):
        rng = random.Random(1234)
        for _ in range(500):
            s = _random_text(rng, rng.randint(0, 80))
            a = parse(s)
            self.assertIsInstance(a, Archive)


class AccessTests(unittest.TestCase):
    def setUp(self):
        self.a = parse("-- one --\n1\n-- two --\n2\n")

    def test_indexing(self):
        self.assertEqual(self.a[0].name, "one")
        self.assertEqual(self.a[-1].name, "two")
        with self.assertRaises(IndexError):
            self.a[2]

    def test_iteration_is_restartable(self):
        self.assertEqual([f.name for f in self.a], ["one", "two"])
        self.assertEqual([f.name for f in self.a.iter()], ["one", "two"])
        self.assertEqual([f.name for f in self.a], ["one", "two"])

    def test_contains_and_len(self):
        self.assertIn("two", self.a)
        self.assertNotIn("three", self.a)
        self.assertEqual(len(self.a), 2)

    def test_add(self):
        f = self.a.add("three", "3")
        self.assertIs(self.a.get("three"), f)
        self.assertTrue(str(self.a).endswith("-- three --\n3\n"))


class FormatTests(unittest.TestCase):
    def test_simple_format(self):
        a = Archive(
            comment="comment1\ncomment2\n",
            files=[
                File("file1", "File 1 text.\n-- foo ---\nMore file 1 text.\n"),
                File("file 2", "File 2 text.\n"),
                File("empty", ""),
                File("noNL", "hello world"),
            ],
        )
        self.assertEqual(format_archive(a), SIMPLE_FORMAT_OUTPUT)
        self.assertEqual(str(a), SIMPLE_FORMAT_OUTPUT)

    def test_file_rendering(self):
        self.assertEqual(str(File("a", "x")), "-- a --\nx\n")
        self.assertEqual(str(File("a", "x\n")), "-- a --\nx\n")
        self.assertEqual(str(File("", "")), "--  --\n")

    def test_comment_newline_enforced(self):
        self.assertEqual(str(Archive(comment="note")), "note\n")

    def test_reparse_reproduces_archive(self):
        a = parse("c\n-- a --\n1\n-- b --\n-- --\n-- c --\nlast")
        self.assertEqual(parse(str(a)), a)

    def test_normalization_is_idempotent(self):
        rng = random.Random(99)
        for _ in range(300):
            s = _random_text(rng, rng.randint(0, 60))
            once = parse(str(parse(s)))
            twice = parse(str(once))
            self.assertEqual(once, twice)
            self.assertEqual(str(once), str(twice))


class FileIOTests(unittest.TestCase):
    def test_from_file_and_write(self):
        with tempfile.TemporaryDirectory() as tmp:
            p = Path(tmp) / "a.txtar"
            p.write_bytes("comment\r\n-- x --\nhello".encode("utf-8"))
            a = parse_file(str(p))
            self.assertEqual(a.comment, "comment\r\n")
            self.assertEqual(a.get("x").content, "hello\n")

            out = Path(tmp) / "out.txtar"
            a.write(out)
            self.assertEqual(out.read_bytes(), b"comment\r\n-- x --\nhello\n")
            self.assertEqual(Archive.from_file(out), a)

    def test_missing_file_raises(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                Archive.from_file(os.path.join(tmp, "missing.txtar"))

    def test_invalid_utf8_raises(self):
        with tempfile.TemporaryDirectory() as tmp:
            p = Path(tmp) / "bin.txtar"
            p.write_bytes(b"-- a --\n\xff\n")
            with self.assertRaises(UnicodeDecodeError):
                Archive.from_file(p)


if __name__ == "__main__":
    unittest.main()
