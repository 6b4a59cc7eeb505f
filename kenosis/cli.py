#!/usr/bin/env python3
"""
Kenosis — Ancient Greek κένωσις (emptying)

Finds software projects below a directory (Cargo, .NET and npm projects),
reports how much space their dependency and build folders take, and can
delete those folders to reclaim disk space. Everything removed is
regenerated by the next build or install.

Usage:
    kenosis                        # Scan the current directory
    kenosis <path>                 # Scan a directory
    kenosis <path> -l rust         # Only report Rust projects
    kenosis <path> --min-size 50M  # Hide projects below 50 MiB
    kenosis <path> --delete        # Report, then remove dependency folders
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Optional

from rich.markup import escape

from kenosis.auxiliary import format_path_for_display, size_argument
from kenosis.console_ui import ConsoleUI
from kenosis.file_operations import FileOperations, OperationResult
from kenosis.project_scanner import (
    ECOSYSTEMS,
    ProjectRecord,
    ProjectScanner,
    ScanResult,
    filter_projects,
    sort_projects,
    total_dependency_size,
)


class Kenosis:
    """Main application class for the Kenosis dependency cleanup tool."""

    def __init__(self, args: argparse.Namespace, ui: Optional[ConsoleUI] = None):
        self.args = args
        self.ui = ui or ConsoleUI()

    # -- scanning ------------------------------------------------------------

    def scan(self, root: Path) -> ScanResult:
        self.ui.print_header("Kenosis", f"Scanning {format_path_for_display(root)}")

        progress = self.ui.create_activity_progress()
        with progress:
            task = progress.add_task("Scanning...", total=None)

            def on_progress(dirs_scanned: int, projects_found: int):
                progress.update(task, description=f"Scanning... {dirs_scanned:,} dirs, {projects_found} projects")

            scanner = ProjectScanner(
                ECOSYSTEMS,
                progress_callback=on_progress,
                keep_going=getattr(self.args, "keep_going", False),
            )
            result = scanner.scan(root)

        for path, error in result.skipped_directories:
            self.ui.print_warning(f"Skipped {escape(format_path_for_display(path))}: {escape(error)}")

        return result

    def select(self, projects: list[ProjectRecord]) -> list[ProjectRecord]:
        """Apply --language and --min-size, then sort largest first"""
        language = getattr(self.args, "language", None)
        if language:
            projects = filter_projects(projects, language)

        min_size = getattr(self.args, "min_size", None) or 0
        if min_size:
            projects = [p for p in projects if p.dependency_size >= min_size]

        return sort_projects(projects)

    # -- reporting -----------------------------------------------------------

    def report(self, projects: list[ProjectRecord], result: ScanResult):
        self.ui.show_projects(projects)
        self.ui.show_total(total_dependency_size(projects))
        self.ui.print_progress(
            f"{len(projects)} projects in {result.directories_scanned:,} dirs, "
            f"scan completed in {result.scan_duration:.1f}s"
        )

    # -- deletion ------------------------------------------------------------

    def delete(self, projects: list[ProjectRecord]) -> list[OperationResult]:
        self.ui.console.print()
        self.ui.print_plain("Removing dependencies:")

        operations = FileOperations(progress_callback=self.ui.show_removal)
        results = operations.delete_all(projects)

        self.ui.show_removal_summary(results)
        return results

    # -- main entry point ----------------------------------------------------

    def run(self) -> int:
        path = getattr(self.args, "path", None) or os.getcwd()
        root = Path(path)

        if not root.is_dir():
            self.ui.print_error(f"Not a directory: {escape(str(path))}")
            return 1

        try:
            result = self.scan(root)
        except OSError as e:
            self.ui.print_error(f"Scan failed: {escape(str(e))}")
            return 1

        projects = self.select(result.projects)
        self.report(projects, result)

        if getattr(self.args, "delete", False):
            self.delete(projects)

        return 0


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kenosis",
        description="Kenosis: find and remove project dependency folders",
    )
    parser.add_argument("path", nargs="?", help="Directory to scan (default: current directory)")
    parser.add_argument("-d", "--delete", action="store_true", help="Remove dependency folders after reporting")
    parser.add_argument(
        "-l",
        "--language",
        choices=[e.name for e in ECOSYSTEMS],
        default=None,
        help="Only report projects of this ecosystem",
    )
    parser.add_argument(
        "--min-size", type=size_argument, default=None, help="Hide projects smaller than this (e.g. 10M, 1G)"
    )
    parser.add_argument(
        "--keep-going", action="store_true", help="Skip unreadable directories instead of aborting the scan"
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    app = Kenosis(args)
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
