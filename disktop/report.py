from __future__ import annotations
import json
import os
import sys
from typing import IO, Iterable, Optional
from .models import RankedItem
from .utils import format_bytes

SIZE_WIDTH = 12

def text_line(item: RankedItem) -> str:
    return f"{format_bytes(item.size):>{SIZE_WIDTH}}  {item.path}"

def ndjson_line(item: RankedItem) -> str:
    return json.dumps({
        "size_bytes": item.size,
        "size_human": format_bytes(item.size),
        "path": item.path,
    })

def print_text(items: Iterable[RankedItem], out: Optional[IO[str]] = None) -> None:
    """Write one aligned line per item, paths byte-for-byte as on disk.

    Undecodable names carry surrogates, so lines go to the binary buffer
    through os.fsencode when the stream has one.
    """
    out = out or sys.stdout
    raw = getattr(out, "buffer", None)
    if raw is None:
        for it in items:
            out.write(text_line(it) + "\n")
        out.flush()
        return
    out.flush()
    for it in items:
        raw.write(os.fsencode(text_line(it) + "\n"))
    raw.flush()

def write_ndjson(items: Iterable[RankedItem], out: IO[str]) -> None:
    for it in items:
        out.write(ndjson_line(it) + "\n")
    out.flush()
