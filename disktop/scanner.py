from __future__ import annotations
import fnmatch
import logging
import os
import queue
import stat as statmod
import threading
import time
from typing import Callable, Iterable, Iterator, List, Optional
import psutil
from .errors import RootError
from .models import ScanConfig, ScanResult
from .utils import clamp

log = logging.getLogger(__name__)

MIN_WORKERS = 4
MAX_WORKERS = 64
BLOCK_UNIT = 512  # POSIX st_blocks unit

CancelFlag = Callable[[], bool]

_DONE = object()

def auto_workers() -> int:
    # stat() is I/O bound, so oversubscribe the cores a little
    n = psutil.cpu_count(logical=True) or 1
    return clamp(n * 2, MIN_WORKERS, MAX_WORKERS)

def resolve_workers(workers: int) -> int:
    return workers if workers > 0 else auto_workers()

def file_bytes(st: os.stat_result, apparent: bool) -> int:
    if apparent:
        return int(st.st_size)
    blocks = getattr(st, "st_blocks", None)
    if blocks is None:
        return int(st.st_size)
    return int(blocks) * BLOCK_UNIT

def has_prefix(path: str, prefixes: Iterable[str]) -> bool:
    for p in prefixes:
        p = p.rstrip(os.sep) or os.sep
        if path == p or path.startswith(p if p.endswith(os.sep) else p + os.sep):
            return True
    return False

def match_any_glob(path: str, globs: Iterable[str]) -> bool:
    p = os.path.normpath(path)
    for g in globs:
        g = g.strip()
        if g and fnmatch.fnmatchcase(p, g):
            return True
    return False

def root_device(root: str) -> Optional[int]:
    try:
        return os.lstat(root).st_dev
    except OSError as e:
        log.warning("cannot read device of %s (%s); not confining to one filesystem", root, e)
        return None

def _keep(path: str, is_link: bool, dev_of: Callable[[], int],
          cfg: ScanConfig, root_dev: Optional[int]) -> bool:
    if has_prefix(path, cfg.skips):
        return False
    if match_any_glob(path, cfg.exclude_globs):
        return False
    if root_dev is not None:
        try:
            if dev_of() != root_dev:
                return False
        except OSError:
            return False
    return not is_link

def walk_candidates(cfg: ScanConfig, root_dev: Optional[int] = None,
                    cancel_flag: Optional[CancelFlag] = None) -> Iterator[str]:
    """Depth-first walk of ``cfg.root`` yielding every non-directory path
    that survives pruning. Pruned directories are never listed."""
    root = cfg.root
    try:
        st = os.lstat(root)
    except OSError:
        return
    if not _keep(root, statmod.S_ISLNK(st.st_mode), lambda: st.st_dev, cfg, root_dev):
        return
    if not statmod.S_ISDIR(st.st_mode):
        yield root
        return

    stack: List[str] = [root]
    while stack:
        if cancel_flag and cancel_flag():
            return
        dir_path = stack.pop()
        subdirs: List[str] = []
        try:
            with os.scandir(dir_path) as it:
                for entry in it:
                    try:
                        is_dir = entry.is_dir(follow_symlinks=False)
                        is_link = entry.is_symlink()
                    except OSError:
                        continue
                    dev_of = lambda e=entry: e.stat(follow_symlinks=False).st_dev
                    if not _keep(entry.path, is_link, dev_of, cfg, root_dev):
                        continue
                    if is_dir:
                        subdirs.append(entry.path)
                    else:
                        yield entry.path
        except OSError as e:
            log.debug("skipping unreadable directory %s: %s", dir_path, e)
        stack.extend(reversed(subdirs))

def resolve(path: str, cfg: ScanConfig) -> Optional[ScanResult]:
    try:
        st = os.lstat(path)
    except OSError as e:
        log.debug("skipping %s: %s", path, e)
        return None
    # lost a race with the walker, or not a plain file
    if not statmod.S_ISREG(st.st_mode):
        return None
    size = file_bytes(st, cfg.apparent)
    if size < cfg.min_size:
        return None
    return ScanResult(size=size, path=path)

def scan(cfg: ScanConfig, cancel_flag: Optional[CancelFlag] = None) -> Iterator[ScanResult]:
    """Stream a ScanResult for every regular file under ``cfg.root`` of at
    least ``cfg.min_size`` bytes.

    Raises RootError right away if the root cannot be stat-ed (a dangling
    symlink root is not an error, it just yields nothing). Results arrive
    in no particular order. Closing the iterator early stops the workers.
    """
    if cfg.queue_size < 1:
        # Queue(maxsize=0) is unbounded
        raise ValueError(f"queue_size must be >= 1, got {cfg.queue_size}")
    try:
        os.lstat(cfg.root)
    except OSError as e:
        raise RootError(cfg.root, e) from e
    return _run(cfg, cancel_flag)

def _run(cfg: ScanConfig, cancel_flag: Optional[CancelFlag]) -> Iterator[ScanResult]:
    t0 = time.time()
    workers = resolve_workers(cfg.workers)
    root_dev = root_device(cfg.root) if cfg.xdev else None
    paths: queue.Queue = queue.Queue(maxsize=cfg.queue_size)
    results: queue.Queue = queue.Queue(maxsize=cfg.queue_size)
    stop = threading.Event()

    def stopped() -> bool:
        return stop.is_set() or bool(cancel_flag and cancel_flag())

    def walk():
        try:
            for path in walk_candidates(cfg, root_dev, stopped):
                paths.put(path)
        finally:
            for _ in range(workers):
                paths.put(_DONE)

    def work():
        while True:
            path = paths.get()
            if path is _DONE:
                return
            if stopped():
                continue
            res = resolve(path, cfg)
            if res is not None:
                results.put(res)

    pool = [threading.Thread(target=walk, name="disktop-walk", daemon=True)]
    pool += [threading.Thread(target=work, name=f"disktop-stat-{i}", daemon=True)
             for i in range(workers)]

    def close():
        for t in pool:
            t.join()
        results.put(_DONE)

    closer = threading.Thread(target=close, name="disktop-close", daemon=True)
    log.debug("scanning %s with %d workers", cfg.root, workers)
    for t in pool:
        t.start()
    closer.start()

    count = 0
    finished = False
    try:
        while True:
            item = results.get()
            if item is _DONE:
                finished = True
                break
            count += 1
            yield item
    finally:
        if not finished:
            stop.set()
            while results.get() is not _DONE:
                pass
        closer.join()
        log.info("scan of %s: %d results in %.2fs (%d workers)",
                 cfg.root, count, time.time() - t0, workers)
