#!/usr/bin/env python3
"""
Console UI Module using Rich

Styled messages, an activity spinner and the project listing used by the
kenosis command line tool.
"""

from typing import Iterable, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from kenosis.auxiliary import format_bytes, truncate_path
from kenosis.file_operations import OperationResult
from kenosis.project_scanner import Ecosystem, ProjectRecord

PROJECT_PATH_WIDTH = 40
REMOVAL_PATH_WIDTH = 60


class ConsoleUI:
    """Console handler using Rich for the kenosis CLI"""

    def __init__(self, force_terminal: Optional[bool] = None, console: Optional[Console] = None):
        """Initialize console with optional terminal forcing"""
        self.console = console or Console(force_terminal=force_terminal, highlight=False)

    # Basic styled output methods
    def print_success(self, message: str):
        """Print success message in green"""
        self.console.print(message, style="green")

    def print_error(self, message: str):
        """Print error message in red"""
        self.console.print(message, style="red bold")

    def print_warning(self, message: str):
        """Print warning message in yellow"""
        self.console.print(message, style="yellow")

    def print_info(self, message: str):
        """Print info message in cyan"""
        self.console.print(message, style="cyan")

    def print_progress(self, message: str):
        """Print progress message in dim white"""
        self.console.print(message, style="white dim")

    def print_plain(self, message: str = ""):
        """Print message in plain white"""
        self.console.print(message, style="white")

    def print_header(self, title: str, subtitle: Optional[str] = None):
        """Print a header with optional subtitle"""
        if subtitle:
            header_text = f"[bold]{title}[/bold]\n[dim]{escape(subtitle)}[/dim]"
        else:
            header_text = f"[bold]{title}[/bold]"

        panel = Panel(header_text, box=box.ROUNDED, padding=(0, 1))
        self.console.print(panel)

    def create_activity_progress(self):
        """Create a Rich progress context manager for activity-only display (no counts)"""
        return Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )

    # Project listing
    @staticmethod
    def ecosystem_tag(ecosystem: Ecosystem) -> str:
        """Colored [label] markup for an ecosystem"""
        return f"\\[[{ecosystem.style}]{ecosystem.label}[/{ecosystem.style}]]"

    def show_projects(self, projects: Iterable[ProjectRecord]):
        """One line per project: tag, truncated path, dependency size"""
        for project in projects:
            # Pad on the visible text; markup would skew the width
            tag_padding = " " * max(10 - len(project.ecosystem.label) - 2, 0)
            path = truncate_path(project.root_path, PROJECT_PATH_WIDTH)
            self.console.print(
                f"{self.ecosystem_tag(project.ecosystem)}{tag_padding} {escape(path):<45}\t"
                f"{format_bytes(project.dependency_size)}"
            )

    def show_total(self, total_size: int):
        self.console.print()
        self.console.print(f"Total size: [bold]{format_bytes(total_size)}[/bold]")

    def show_removal(self, result: OperationResult):
        """Report the outcome for a single dependency path"""
        path = escape(truncate_path(result.operation.path, REMOVAL_PATH_WIDTH))
        if result.skipped:
            self.print_progress(f"Skipping empty: {path}")
        elif result.success:
            self.print_plain(f"Removing {path}")
        else:
            self.print_warning(f"Could not remove {path}: {escape(result.error_message or 'unknown error')}")

    def show_removal_summary(self, results: list[OperationResult]):
        """Show summary of completed removals"""
        removed = [r for r in results if r.success and not r.skipped]
        failed = [r for r in results if not r.success]
        reclaimed = sum(r.reclaimed for r in results)

        self.console.print()
        if removed:
            self.print_success(f"Removed {len(removed)} folders, reclaimed {format_bytes(reclaimed)}")
        else:
            self.print_info("Nothing removed.")
        if failed:
            self.print_warning(f"Failed to remove {len(failed)} folders")
