"""
txtar: a trivial text-based file archive format.

An archive is zero or more comment lines followed by file entries. Each entry
begins with a marker line of the form "-- FILENAME --" and is followed by the
file's content lines; the comment or content ends at the next marker line.
Surrounding white space in the name is stripped. A missing final newline is
treated as present.

There are no syntax errors: every input parses to some archive.

- Parsing and canonical formatting (txtar.archive, txtar.scanner)
- Creating archives from files and extracting them (txtar.fsio)
- A `txtar` command line tool (txtar.cli)
"""

from .archive import Archive, File, parse, parse_file, format_archive

__version__ = "0.1"

__all__ = [
    "Archive",
    "File",
    "parse",
    "parse_file",
    "format_archive",
    "constants",
    "scanner",
    "archive",
    "fsio",
    "errors",
    "pathutil",
    "cli",
]
