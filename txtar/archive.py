from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from .constants import ENCODING, MARKER, MARKER_END
from .scanner import fix_trailing_newline, scan


@dataclass
class File:
    """A single named section of an :class:`Archive`."""

    name: str
    content: str = ""

    def __str__(self) -> str:
        return f"{MARKER}{self.name}{MARKER_END}\n{fix_trailing_newline(self.content)}"


@dataclass
class Archive:
    """A txtar archive: a leading comment and an ordered list of files.

    Build one from text with :meth:`from_text` (or :func:`parse`), from disk
    with :meth:`from_file`, or programmatically with :meth:`add`. ``str()``
    renders the canonical text form.

    Names are not required to be unique. :meth:`get` returns the first file
    with a given name; later ones are reachable by index or iteration.
    """

    comment: str = ""
    files: List[File] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: Union[str, bytes]) -> "Archive":
        """Parse ``text`` into an archive. Never fails for ``str`` input.

        ``bytes`` are decoded as UTF-8 first; invalid UTF-8 raises
        ``UnicodeDecodeError``.
        """
        if isinstance(text, bytes):
            text = text.decode(ENCODING)

        end, marker = scan(text)
        if marker is None:
            return cls(comment=fix_trailing_newline(text))

        a = cls(comment=text[:end])
        while marker is not None:
            name, start = marker
            end, marker = scan(text, start)
            content = text[start:end]
            if marker is None:
                content = fix_trailing_newline(content)
            a.files.append(File(name, content))
        return a

    @classmethod
    def from_file(cls, path) -> "Archive":
        """Read and parse the archive at ``path``.

        Errors reading the file (``OSError``, ``UnicodeDecodeError``) propagate.
        """
        with open(path, "r", encoding=ENCODING, newline="") as fh:
            raw = fh.read()
        return cls.from_text(raw)

    def get(self, name: str) -> Optional[File]:
        for f in self.files:
            if f.name == name:
                return f
        return None

    def iter(self) -> Iterator[File]:
        return iter(self.files)

    def names(self) -> List[str]:
        return [f.name for f in self.files]

    def add(self, name: str, content: str = "") -> File:
        f = File(name, content)
        self.files.append(f)
        return f

    def format(self) -> str:
        parts = [fix_trailing_newline(self.comment)]
        parts.extend(str(f) for f in self.files)
        return "".join(parts)

    def write(self, path) -> None:
        with open(path, "w", encoding=ENCODING, newline="") as fh:
            fh.write(self.format())

    def __str__(self) -> str:
        return self.format()

    def __iter__(self) -> Iterator[File]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    def __getitem__(self, index: int) -> File:
        return self.files[index]

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self.files)


def parse(text: Union[str, bytes]) -> Archive:
    return Archive.from_text(text)


def parse_file(path) -> Archive:
    return Archive.from_file(path)


def format_archive(archive: Archive) -> str:
    return archive.format()
