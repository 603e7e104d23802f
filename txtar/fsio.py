from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .archive import Archive, File
from .constants import (
    ENCODING,
    EXISTS_OVERWRITE,
    EXISTS_SKIP,
    EXISTS_RENAME,
    EXISTS_POLICIES,
    DEFAULT_EXISTS_POLICY,
)
from .errors import DestinationExistsError, MarkerInContentError, UnsafeNameError
from .pathutil import norm_path
from .scanner import has_marker


@dataclass
class ExtractResult:
    written: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    # (archive name, path actually written)
    renamed: List[Tuple[str, str]] = field(default_factory=list)


def _collect(inputs: Iterable[str]) -> List[Tuple[str, str]]:
    """Map input files/directories to (archive name, filesystem path) pairs."""
    out: List[Tuple[str, str]] = []
    for p in (Path(x) for x in inputs):
        if p.is_dir():
            base = p.name if p.name not in ("", ".", "..") else p.resolve().name
            for root, dirnames, filenames in os.walk(str(p)):
                # prune symlink directories to avoid walking into them
                dirnames[:] = sorted(d for d in dirnames if not os.path.islink(os.path.join(root, d)))
                for f in sorted(filenames):
                    full = os.path.join(root, f)
                    if os.path.islink(full):
                        continue
                    rel = os.path.relpath(full, start=str(p))
                    arc = "/".join([base] + rel.split(os.sep)) if base else rel.replace(os.sep, "/")
                    out.append((arc, full))
        else:
            # Missing paths surface as FileNotFoundError when read below.
            out.append((p.name, str(p)))
    return out


def archive_from_paths(inputs: Iterable[str], *, comment: str = "") -> Archive:
    """Build an archive from files and directory trees.

    Files are stored under their base name, directory contents under
    ``<dirname>/<relative path>``. Every file must be UTF-8 text that does not
    itself contain a marker line, otherwise the archive would not read back
    the same. The same holds for ``comment``, and names may not carry
    leading or trailing white space, which parsing strips.
    """
    if has_marker(comment):
        raise MarkerInContentError("archive", "comment")
    a = Archive(comment=comment)
    for arc, full in _collect(inputs):
        if "\n" in arc or "\r" in arc:
            raise UnsafeNameError(f"Name may not contain a newline: {arc!r}")
        if arc != arc.strip():
            raise UnsafeNameError(f"Name may not start or end with white space: {arc!r}")
        with open(full, "r", encoding=ENCODING, newline="") as fh:
            content = fh.read()
        if has_marker(content):
            raise MarkerInContentError(arc)
        a.add(arc, content)
    return a


def _next_nonconflicting_path(path: str) -> str:
    if not os.path.lexists(path):
        return path
    base_dir = os.path.dirname(path)
    root, ext = os.path.splitext(os.path.basename(path))
    i = 1
    while True:
        candidate = os.path.join(base_dir, f"{root} ({i}){ext}")
        if not os.path.lexists(candidate):
            return candidate
        i += 1


def _match_key(name: str) -> str:
    # norm_path without the rejections, for filtering only
    parts = [q for q in name.replace("\\", "/").split("/") if q not in ("", ".")]
    return "/".join(parts)


def _selected(files: Iterable[File], names: Optional[Iterable[str]]) -> List[Tuple[str, File]]:
    chosen = list(files)
    if names:
        wanted = [norm_path(n) for n in names]
        keep: List[File] = []
        for f in chosen:
            k = _match_key(f.name)
            if any(k == w or k.startswith(w + "/") for w in wanted):
                keep.append(f)
        chosen = keep
    # Only the files being written need safe names.
    return [(norm_path(f.name), f) for f in chosen]


def extract(
    archive: Archive,
    outdir: str = ".",
    *,
    names: Optional[Iterable[str]] = None,
    exists: str = DEFAULT_EXISTS_POLICY,
    quiet: bool = True,
) -> ExtractResult:
    """Write the files of ``archive`` below ``outdir``.

    Args:
        archive: Archive to extract.
        outdir: Destination directory; created if missing.
        names: Only extract files equal to, or below, these names.
        exists: What to do when a destination exists: overwrite, skip,
            rename (append ' (n)' before the extension) or fail.
        quiet: When False, report each file on stdout.

    All names are validated before anything is written, so an unsafe name
    leaves ``outdir`` untouched.
    """
    if exists not in EXISTS_POLICIES:
        raise ValueError(f"Unknown exists policy: {exists!r}")

    selected = _selected(archive, names)
    res = ExtractResult()
    for rel, f in selected:
        dst = os.path.join(outdir or ".", *rel.split("/"))
        os.makedirs(os.path.dirname(dst) or ".", exist_ok=True)
        actual_dst = dst
        if os.path.lexists(actual_dst):
            if exists == EXISTS_OVERWRITE:
                if os.path.isdir(actual_dst) and not os.path.islink(actual_dst):
                    raise DestinationExistsError(f"Cannot overwrite directory with file: {actual_dst}")
            elif exists == EXISTS_SKIP:
                if not quiet:
                    print(f"    skipping: {rel} (exists)")
                res.skipped.append(rel)
                continue
            elif exists == EXISTS_RENAME:
                actual_dst = _next_nonconflicting_path(actual_dst)
                res.renamed.append((rel, actual_dst))
            else:
                raise DestinationExistsError(f"Destination exists: {actual_dst}")

        with open(actual_dst, "w", encoding=ENCODING, newline="") as fh:
            fh.write(f.content)
        res.written.append(actual_dst)
        if not quiet:
            print(f"  extracting: {rel}")
            if actual_dst != dst:
                print(f"       note: renamed to {actual_dst}")
    return res
