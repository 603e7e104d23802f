from __future__ import annotations

import argparse
import os
import shutil
import sys
import tempfile
from typing import List, Optional

from txtar.archive import Archive
from txtar.constants import ENCODING, EXISTS_POLICIES, DEFAULT_EXISTS_POLICY
from txtar.errors import TxtarError
from txtar.fsio import archive_from_paths, extract


def cmd_list(archive: str) -> bool:
    """List archive files as ``<bytes>\\t<name>``.

    Args:
        archive: Path to a txtar file.
    """
    a = Archive.from_file(archive)
    for f in a:
        print(f"{len(f.content.encode(ENCODING))}\t{f.name}")
    return True


def cmd_comment(archive: str) -> bool:
    a = Archive.from_file(archive)
    sys.stdout.write(a.comment)
    return True


def cmd_cat(archive: str, name: str) -> bool:
    """Print the first file called ``name``; False when there is none."""
    a = Archive.from_file(archive)
    f = a.get(name)
    if f is None:
        print(f"Error: no file named {name!r} in {archive}", file=sys.stderr)
        return False
    sys.stdout.write(f.content)
    return True


def cmd_create(output: str, inputs: List[str], *, comment: str = "", quiet: bool = False) -> bool:
    """Create an archive from files and directories.

    Args:
        output: Path of the archive to write, or ``-`` for stdout.
        inputs: Files or directories to store.
        comment: Text placed before the first file.
        quiet: Suppress the per-file listing.
    """
    a = archive_from_paths(inputs, comment=comment)
    if output == "-":
        sys.stdout.write(a.format())
        return True
    a.write(output)
    if not quiet:
        for f in a:
            print(f"      adding: {f.name}")
    print(f"Done: {len(a)} files written to {output}")
    return True


def cmd_extract(
    archive: str,
    *,
    outdir: str = ".",
    names: Optional[List[str]] = None,
    exists: str = DEFAULT_EXISTS_POLICY,
    quiet: bool = False,
) -> bool:
    """Extract files from an archive to a directory."""
    a = Archive.from_file(archive)
    res = extract(a, outdir, names=names, exists=exists, quiet=quiet)
    print(f"Done: {len(res.written)} written, {len(res.skipped)} skipped, {len(res.renamed)} renamed")
    return True


def _replace_file(path: str, text: str) -> None:
    """Write ``text`` to a temporary file beside ``path`` and swap it in."""
    fd, temp_path = tempfile.mkstemp(prefix=".txtar-fmt-", suffix=".tmp", dir=os.path.dirname(os.path.abspath(path)))
    try:
        with os.fdopen(fd, "w", encoding=ENCODING, newline="") as fh:
            fh.write(text)
        shutil.copymode(path, temp_path)
        os.replace(temp_path, path)
    except OSError:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def cmd_fmt(archive: str, *, write: bool = False, check: bool = False) -> bool:
    """Print the canonical form of an archive, or rewrite it in place.

    With ``check`` nothing is written; returns False if the file is not
    already canonical.
    """
    with open(archive, "r", encoding=ENCODING, newline="") as fh:
        raw = fh.read()
    canonical = Archive.from_text(raw).format()
    if check:
        if raw != canonical:
            print(f"{archive}: not formatted", file=sys.stderr)
            return False
        return True
    if write:
        if raw != canonical:
            _replace_file(archive, canonical)
        return True
    sys.stdout.write(canonical)
    return True


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="txtar",
        description="txtar text archive tool",
        epilog="A txtar archive is a comment followed by files, each introduced by a '-- NAME --' line.",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_list = sub.add_parser("list", help="List archive files")
    ap_list.add_argument("archive", help="Archive path")

    ap_comment = sub.add_parser("comment", help="Print the archive comment")
    ap_comment.add_argument("archive", help="Archive path")

    ap_cat = sub.add_parser("cat", help="Print one file from the archive")
    ap_cat.add_argument("archive", help="Archive path")
    ap_cat.add_argument("name", help="File name inside the archive")

    ap_create = sub.add_parser("create", help="Create archive")
    ap_create.add_argument("output", help="Output archive path ('-' for stdout)")
    ap_create.add_argument("inputs", nargs="+", help="Input files/directories")
    ap_create.add_argument("--comment", default="", help="Archive comment")
    ap_create.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_extract = sub.add_parser("extract", help="Extract files")
    ap_extract.add_argument("archive", help="Archive path")
    ap_extract.add_argument("names", nargs="*", help="Specific files or directories to extract")
    ap_extract.add_argument("--outdir", default=".", help="Output directory")
    ap_extract.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")
    ap_extract.add_argument(
        "--exists",
        choices=list(EXISTS_POLICIES),
        default=DEFAULT_EXISTS_POLICY,
        help=(
            "What to do if a destination file exists: overwrite (truncate/replace), "
            "skip (do not extract that file), rename (append ' (n)' before extension), or fail (abort). "
            "Default: rename"
        ),
    )

    ap_fmt = sub.add_parser("fmt", help="Print the canonical form of an archive")
    ap_fmt.add_argument("archive", help="Archive path")
    ap_fmt.add_argument("--write", "-w", action="store_true", help="Rewrite the archive in place")
    ap_fmt.add_argument("--check", action="store_true", help="Exit 1 if the archive is not canonical")

    args = ap.parse_args(argv)
    try:
        if args.cmd == "list":
            success = cmd_list(args.archive)
        elif args.cmd == "comment":
            success = cmd_comment(args.archive)
        elif args.cmd == "cat":
            success = cmd_cat(args.archive, args.name)
        elif args.cmd == "create":
            success = cmd_create(args.output, args.inputs, comment=args.comment, quiet=args.quiet)
        elif args.cmd == "extract":
            success = cmd_extract(
                args.archive,
                outdir=args.outdir,
                names=args.names,
                exists=args.exists,
                quiet=args.quiet,
            )
        elif args.cmd == "fmt":
            success = cmd_fmt(args.archive, write=args.write, check=args.check)
        else:
            raise RuntimeError("Unknown command")
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except UnicodeDecodeError as e:
        print(f"Error: not UTF-8 text: {e}", file=sys.stderr)
        sys.exit(2)
    except (TxtarError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
