from __future__ import annotations
import os
from pathlib import Path
from typing import Dict
import pytest


def make_tree(root: Path, files: Dict[str, int]) -> Path:
    """Create ``files`` (relative path -> byte length) under ``root``."""
    for rel, size in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(b"x" * size)
    return root


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    return make_tree(tmp_path / "root", {
        "a.bin": 10,
        "b.bin": 50,
        "sub/c.bin": 5,
        "sub/deeper/d.bin": 100,
    })


@pytest.fixture
def no_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the default config location at an empty directory."""
    cfg_home = tmp_path / "xdg"
    cfg_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(cfg_home))
    return cfg_home


is_root = hasattr(os, "geteuid") and os.geteuid() == 0
