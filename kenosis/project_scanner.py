#!/usr/bin/env python3
"""
Project Scanner Module for Kenosis

Discovers software project roots below a directory and measures how much
disk space their regenerable dependency folders (target, node_modules,
bin/obj, ...) occupy.

A directory is a project root when one of its immediate entries is a known
build manifest. Every directory is visited, matched or not, so projects
nested inside other projects are reported on their own.
"""

import os
import stat
import time
import tomllib
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Callable, Iterable, Optional, Sequence

# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Ecosystem:
    """A recognized kind of project and the folders it can regenerate"""

    name: str
    label: str
    style: str
    manifests: tuple[str, ...] = ()
    extensions: tuple[str, ...] = ()
    dependency_paths: tuple[str, ...] = ()

    def matches(self, filename: str) -> bool:
        """Return True if *filename* marks a project of this ecosystem."""
        lowered = filename.lower()
        if any(lowered == manifest.lower() for manifest in self.manifests):
            return True
        return PurePath(filename).suffix in self.extensions


@dataclass(frozen=True)
class ProjectRecord:
    """One discovered project root.

    ``dependency_size`` is measured once during the scan and is not updated
    when the filesystem changes afterwards.
    """

    ecosystem: Ecosystem
    root_path: Path
    dependency_size: int = 0

    @property
    def dependency_dirs(self) -> list[Path]:
        return [self.root_path / p for p in dependency_paths(self.ecosystem)]


@dataclass
class ScanResult:
    root_path: Path
    projects: list[ProjectRecord] = field(default_factory=list)
    directories_scanned: int = 0
    skipped_directories: list[tuple[Path, str]] = field(default_factory=list)
    scan_duration: float = 0.0

    @property
    def total_size(self) -> int:
        return total_dependency_size(self.projects)


# ---------------------------------------------------------------------------
# Ecosystem table loading from TOML
# ---------------------------------------------------------------------------

ECOSYSTEMS_FILE = Path(__file__).parent / "kenosis_ecosystems.toml"


def load_ecosystems(path: Path = ECOSYSTEMS_FILE) -> tuple[Ecosystem, ...]:
    """Load the ecosystem table from a TOML file.

    Entries keep their file order, which is the classifier priority order.

    Raises:
        ValueError: If an entry lacks a name, a marker or a dependency path
    """
    with path.open("rb") as f:
        data = tomllib.load(f)

    ecosystems: list[Ecosystem] = []
    for entry in data.get("ecosystems", []):
        name = entry.get("name")
        if not name:
            raise ValueError(f"Ecosystem entry without a name in {path}")

        ecosystem = Ecosystem(
            name=name,
            label=entry.get("label", name),
            style=entry.get("style", "white"),
            manifests=tuple(entry.get("manifests", [])),
            extensions=tuple(entry.get("extensions", [])),
            dependency_paths=tuple(entry.get("dependency_paths", [])),
        )
        if not ecosystem.manifests and not ecosystem.extensions:
            raise ValueError(f"Ecosystem '{name}' has no manifest or extension markers")
        if not ecosystem.dependency_paths:
            raise ValueError(f"Ecosystem '{name}' has no dependency paths")
        ecosystems.append(ecosystem)

    return tuple(ecosystems)


# Load once at import time
ECOSYSTEMS = load_ecosystems()


def get_ecosystem(name: str, ecosystems: Sequence[Ecosystem] = ECOSYSTEMS) -> Ecosystem:
    for ecosystem in ecosystems:
        if ecosystem.name == name:
            return ecosystem
    raise KeyError(name)


def dependency_paths(ecosystem: Ecosystem) -> tuple[str, ...]:
    """Relative subpaths of a project root holding removable artifacts"""
    return ecosystem.dependency_paths


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def _match_entries(names: Iterable[str], ecosystems: Sequence[Ecosystem]) -> Optional[Ecosystem]:
    for name in names:
        for ecosystem in ecosystems:
            if ecosystem.matches(name):
                return ecosystem
    return None


def classify_directory(directory, ecosystems: Sequence[Ecosystem] = ECOSYSTEMS) -> Optional[Ecosystem]:
    """Return the ecosystem of *directory* if it is a project root.

    Only the immediate entries are inspected, by name. Manifest content is
    never read, so an empty or broken manifest still counts.

    Raises:
        OSError: If the directory cannot be listed
    """
    with os.scandir(directory) as entries:
        return _match_entries((entry.name for entry in entries), ecosystems)


# ---------------------------------------------------------------------------
# Size accumulation
# ---------------------------------------------------------------------------


def path_size(path) -> int:
    """Return the apparent size in bytes of a file or directory tree.

    A path that is missing or cannot be opened (stat or listing refused)
    counts as 0. Symbolic links are sized as links and never followed, so
    link cycles cannot trap the walk.

    Raises:
        OSError: If reading a directory fails after it was opened
    """
    total = 0
    pending = [os.fspath(path)]
    while pending:
        current = pending.pop()
        try:
            st = os.lstat(current)
        except OSError:
            continue

        if not stat.S_ISDIR(st.st_mode):
            total += st.st_size
            continue

        try:
            entries = os.scandir(current)
        except OSError:
            continue

        with entries:
            pending.extend(entry.path for entry in entries)

    return total


def dependency_size(root_path: Path, ecosystem: Ecosystem) -> int:
    return sum(path_size(root_path / p) for p in dependency_paths(ecosystem))


# ---------------------------------------------------------------------------
# Result helpers
# ---------------------------------------------------------------------------


def sort_projects(projects: Iterable[ProjectRecord]) -> list[ProjectRecord]:
    """Largest dependency footprint first"""
    return sorted(projects, key=lambda p: p.dependency_size, reverse=True)


def filter_projects(projects: Iterable[ProjectRecord], ecosystem_name: str) -> list[ProjectRecord]:
    return [p for p in projects if p.ecosystem.name == ecosystem_name]


def total_dependency_size(projects: Iterable[ProjectRecord]) -> int:
    """Sum of per-project sizes.

    Nested projects with overlapping dependency folders are each counted in
    full, so the total can exceed the bytes actually on disk.
    """
    return sum(p.dependency_size for p in projects)


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


class ProjectScanner:
    """Depth-first pre-order walk collecting project roots"""

    PROGRESS_INTERVAL = 200

    def __init__(
        self,
        ecosystems: Sequence[Ecosystem] = ECOSYSTEMS,
        progress_callback: Optional[Callable[[int, int], None]] = None,
        keep_going: bool = False,
    ):
        """Initialize scanner

        Args:
            ecosystems: Ecosystem table in priority order
            progress_callback: Called with (directories_scanned, projects_found)
            keep_going: Record unreadable directories and continue instead of
                aborting the scan on the first error
        """
        self.ecosystems = tuple(ecosystems)
        self.progress_callback = progress_callback
        self.keep_going = keep_going

    def scan(self, root) -> ScanResult:
        """Walk *root* and return every project found below it (root included).

        Order follows directory listing order, not names; sort before display.

        Raises:
            OSError: On the first listing or sizing failure unless keep_going
        """
        root_path = Path(root).resolve()
        result = ScanResult(root_path=root_path)
        start = time.monotonic()

        # Explicit stack instead of recursion; children are pushed reversed
        # so they pop in listing order.
        pending = [root_path]
        while pending:
            directory = pending.pop()
            result.directories_scanned += 1

            try:
                ecosystem = classify_directory(directory, self.ecosystems)
                subdirs = self._subdirectories(directory)
            except OSError as e:
                if not self.keep_going:
                    raise
                result.skipped_directories.append((directory, str(e)))
                continue

            if ecosystem is not None:
                try:
                    size = dependency_size(directory, ecosystem)
                except OSError as e:
                    if not self.keep_going:
                        raise
                    result.skipped_directories.append((directory, str(e)))
                else:
                    result.projects.append(ProjectRecord(ecosystem, directory, size))

            pending.extend(reversed(subdirs))

            if self.progress_callback and result.directories_scanned % self.PROGRESS_INTERVAL == 0:
                self.progress_callback(result.directories_scanned, len(result.projects))

        if self.progress_callback:
            self.progress_callback(result.directories_scanned, len(result.projects))

        result.scan_duration = time.monotonic() - start
        return result

    @staticmethod
    def _subdirectories(directory: Path) -> list[Path]:
        """Real subdirectories of *directory* in listing order.

        Symlinked directories are not descended into.
        """
        with os.scandir(directory) as entries:
            return [directory / entry.name for entry in entries if entry.is_dir(follow_symlinks=False)]


def scan_projects(root, ecosystems: Sequence[Ecosystem] = ECOSYSTEMS) -> list[ProjectRecord]:
    """Scan *root* and return the discovered project records"""
    return ProjectScanner(ecosystems).scan(root).projects
