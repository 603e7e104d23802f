from __future__ import annotations

from .errors import UnsafeNameError


def norm_path(p: str) -> str:
    """Normalize an archive file name to a relative forward-slash path.

    Rules:
    - Convert backslashes to slashes
    - Strip leading/trailing slashes
    - Remove empty and '.' segments
    - Reject '..' segments, newlines and names that normalize to nothing
    """
    if "\n" in p or "\r" in p:
        raise UnsafeNameError(f"Name may not contain a newline: {p!r}")
    p = p.replace("\\", "/").strip("/")
    parts = [q for q in p.split("/") if q not in ("", ".")]
    for q in parts:
        if q == "..":
            raise UnsafeNameError(f"Name may not contain '..': {p!r}")
    if not parts:
        raise UnsafeNameError(f"Name does not name a file: {p!r}")
    return "/".join(parts)
