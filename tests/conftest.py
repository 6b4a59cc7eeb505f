"""Shared test fixtures for Kenosis tests."""

from __future__ import annotations

import errno
import os
from pathlib import Path
from typing import Callable, Union

import pytest

from kenosis.project_scanner import ProjectRecord, get_ecosystem

TreeLayout = dict[str, Union[int, bytes, None]]


def _build_tree(root: Path, layout: TreeLayout) -> Path:
    """Create files below *root*.

    Keys are relative paths. An int value writes that many bytes, a bytes
    value is written as is and None creates an empty directory.
    """
    for rel, content in layout.items():
        target = root / rel
        if content is None:
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, int):
            content = b"x" * content
        target.write_bytes(content)
    return root


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[TreeLayout], Path]:
    """Build a directory tree inside tmp_path and return its root."""

    def factory(layout: TreeLayout, root: Path | None = None) -> Path:
        return _build_tree(root or tmp_path, layout)

    return factory


@pytest.fixture
def make_record() -> Callable[..., ProjectRecord]:
    def factory(root: Path, ecosystem: str = "javascript", size: int = 0) -> ProjectRecord:
        return ProjectRecord(get_ecosystem(ecosystem), root, size)

    return factory


class _FailingListing:
    """A directory listing that opens fine but fails on the first read."""

    def __init__(self, path: str):
        self.path = path

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def __iter__(self):
        return self

    def __next__(self):
        raise OSError(errno.EIO, "Input/output error", self.path)

    def close(self):
        pass


@pytest.fixture
def fail_listing(monkeypatch) -> Callable[..., None]:
    """Make os.scandir fail for one directory.

    By default opening the directory is refused with PermissionError. With
    ``on_open=False`` the listing opens and then fails with an I/O error.
    """
    real_scandir = os.scandir

    def factory(path, on_open: bool = True) -> None:
        target = os.path.realpath(path)

        def scandir(p="."):
            if os.path.realpath(p) == target:
                if on_open:
                    raise PermissionError(errno.EACCES, "Permission denied", target)
                return _FailingListing(target)
            return real_scandir(p)

        monkeypatch.setattr(os, "scandir", scandir)

    return factory
