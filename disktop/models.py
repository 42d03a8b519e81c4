from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

QUEUE_SIZE = 4096

@dataclass(frozen=True)
class ScanConfig:
    root: str
    min_size: int = 0                     # bytes, inclusive
    apparent: bool = False                # st_size instead of allocated blocks
    xdev: bool = True                     # stay on the root's device
    workers: int = 0                      # <= 0 -> auto-tune
    skips: Tuple[str, ...] = ()           # hard path prefixes, e.g. /proc
    exclude_globs: Tuple[str, ...] = ()   # matched on the full path
    queue_size: int = QUEUE_SIZE

@dataclass(frozen=True)
class ScanResult:
    size: int
    path: str

@dataclass(frozen=True)
class RankedItem:
    size: int
    path: str

    @classmethod
    def from_result(cls, result: ScanResult) -> "RankedItem":
        return cls(size=result.size, path=result.path)
