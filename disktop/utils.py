from __future__ import annotations
import re
from typing import Optional, Tuple
from .errors import SizeFormatError

_UNITS = "KMGTPE"
_SIZE_RE = re.compile(r"^([0-9]*\.?[0-9]+)\s*([KMGTP]?)(I?B)?$", re.IGNORECASE)

def format_bytes(num: int) -> str:
    if num < 1024:
        return f"{num}B"
    x = float(num)
    exp = -1
    while x >= 1024.0 and exp < len(_UNITS) - 1:
        x /= 1024.0
        exp += 1
    return f"{x:.1f}{_UNITS[exp]}iB"

def parse_size(text: str) -> int:
    """Convert ``10K``, ``1.5G``, ``100MiB`` or a plain byte count into bytes.

    Suffixes are binary (K = 1024). An empty string means 0.
    """
    s = (text or "").strip()
    if not s:
        return 0
    m = _SIZE_RE.match(s)
    if not m:
        raise SizeFormatError(f"invalid size: {text!r}")
    number, unit, tail = m.group(1), m.group(2).upper(), m.group(3)
    # "5iB" has no unit to be binary about
    if tail and tail.upper() == "IB" and not unit:
        raise SizeFormatError(f"invalid size: {text!r}")
    mult = 1024 ** (_UNITS.index(unit) + 1) if unit else 1
    return int(float(number) * mult)

def split_globs(text: Optional[str]) -> Tuple[str, ...]:
    if not text:
        return ()
    return tuple(p.strip() for p in text.split(",") if p.strip())

def clamp(v, lo, hi):
    return lo if v < lo else hi if v > hi else v
