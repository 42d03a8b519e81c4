from __future__ import annotations
import argparse
import logging
import sys
import threading
from pathlib import Path
from typing import List, Optional, Sequence
from .errors import ConfigError, RootError, SizeFormatError
from .log import setup_logging
from .models import RankedItem, ScanConfig
from .report import print_text, write_ndjson
from .scanner import scan
from .settings import DEFAULT_ROOT, Settings, load_settings
from .topn import TopNSelector
from .utils import parse_size, split_globs

APP_NAME = "disktop"

EXIT_OK = 0
EXIT_ROOT = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

log = logging.getLogger(APP_NAME)

class CancelFlag:
    def __init__(self):
        self._ev = threading.Event()

    def cancel(self):
        self._ev.set()

    def __call__(self) -> bool:
        return self._ev.is_set()

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=APP_NAME,
        description="List the largest files under a directory tree.",
    )
    p.add_argument("--root", default=DEFAULT_ROOT, help="directory to scan (default: %(default)s)")
    p.add_argument("-n", "--top", type=int, default=None, metavar="N",
                   help="show the N largest files (default: 50)")
    p.add_argument("--min", dest="min_size", default=None, metavar="SIZE",
                   help="only list files >= SIZE, e.g. 100M or 1.5G")
    p.add_argument("--xdev", action=argparse.BooleanOptionalAction, default=None,
                   help="stay on the root's filesystem (default: on)")
    p.add_argument("--apparent", action=argparse.BooleanOptionalAction, default=None,
                   help="rank by apparent size instead of allocated bytes")
    p.add_argument("--workers", type=int, default=None, metavar="K",
                   help="concurrent stat workers, 0 = auto")
    p.add_argument("--ndjson", action=argparse.BooleanOptionalAction, default=None,
                   help="print one JSON object per line")
    p.add_argument("--exclude-globs", default="", metavar="GLOBS",
                   help="comma-separated glob patterns matched on the full path; "
                        "'*' also matches '/', so '/a/*.log' excludes /a/b/x.log too")
    p.add_argument("--config", type=Path, default=None, metavar="FILE",
                   help="configuration file (default: ~/.config/disktop/config.toml)")
    p.add_argument("-v", "--verbose", action="count", default=0,
                   help="log progress (-v) or debug details (-vv) to stderr")
    return p

def _pick(value, fallback):
    return fallback if value is None else value

def make_config(args: argparse.Namespace, settings: Settings) -> ScanConfig:
    return ScanConfig(
        root=args.root,
        min_size=parse_size(_pick(args.min_size, settings.min_size)),
        apparent=_pick(args.apparent, settings.apparent),
        xdev=_pick(args.xdev, settings.xdev),
        workers=_pick(args.workers, settings.workers),
        skips=settings.skips,
        exclude_globs=settings.exclude_globs + split_globs(args.exclude_globs),
    )

def collect(cfg: ScanConfig, top_n: int, cancel_flag: Optional[CancelFlag] = None) -> List[RankedItem]:
    keeper = TopNSelector(top_n)
    stream = scan(cfg, cancel_flag)
    try:
        for r in stream:
            keeper.admit(RankedItem.from_result(r))
    finally:
        stream.close()
    return keeper.drain_descending()

def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.config)
        cfg = make_config(args, settings)
    except (ConfigError, SizeFormatError) as e:
        log.error("%s", e)
        return EXIT_USAGE

    top_n = _pick(args.top, settings.top_n)
    if top_n < 0:
        log.error("-n must be >= 0, got %d", top_n)
        return EXIT_USAGE

    try:
        items = collect(cfg, top_n)
    except RootError as e:
        log.error("%s", e)
        return EXIT_ROOT
    except KeyboardInterrupt:
        log.warning("interrupted")
        return EXIT_INTERRUPTED

    if _pick(args.ndjson, settings.ndjson):
        write_ndjson(items, sys.stdout)
    else:
        print_text(items)
    return EXIT_OK

def run():
    sys.exit(main())
