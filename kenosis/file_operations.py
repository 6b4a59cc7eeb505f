#!/usr/bin/env python3
"""
Dependency Removal Module

Deletes the dependency folders of discovered projects. Removal is best
effort: each path gets its own result and a failure on one path never stops
the others.
"""

import pathlib
import shutil
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional

from kenosis.project_scanner import ProjectRecord, path_size


class OperationType(Enum):
    """What was done (or attempted) for a dependency path"""

    REMOVE = "remove"
    SKIP_EMPTY = "skip_empty"


@dataclass
class FileOperation:
    """A dependency path of a project and the action chosen for it"""

    path: pathlib.Path
    operation_type: OperationType
    project: ProjectRecord


@dataclass
class OperationResult:
    """Result of a file operation"""

    operation: FileOperation
    success: bool
    size: int = 0  # Measured right before deletion
    error_message: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.operation.operation_type is OperationType.SKIP_EMPTY

    @property
    def reclaimed(self) -> int:
        if self.success and not self.skipped:
            return self.size
        return 0


class FileOperations:
    """Removes dependency folders of project records"""

    def __init__(self, progress_callback: Optional[Callable[[OperationResult], None]] = None):
        """Initialize with optional callback invoked after each path is handled"""
        self.progress_callback = progress_callback

    def plan_operation(self, project: ProjectRecord, path: pathlib.Path) -> tuple[FileOperation, int]:
        """Measure *path* now and decide whether it needs removing.

        The scan-time size is not reused; the folder may have changed since.
        """
        size = path_size(path)
        operation_type = OperationType.REMOVE if size > 0 else OperationType.SKIP_EMPTY
        return FileOperation(path=path, operation_type=operation_type, project=project), size

    def execute_operation(self, operation: FileOperation, size: int) -> OperationResult:
        """Execute a single planned operation"""
        if operation.operation_type is OperationType.SKIP_EMPTY:
            return OperationResult(operation=operation, success=True, size=0)

        try:
            if operation.path.is_dir() and not operation.path.is_symlink():
                shutil.rmtree(operation.path)
            else:
                operation.path.unlink()
            return OperationResult(operation=operation, success=True, size=size)
        except OSError as e:
            return OperationResult(operation=operation, success=False, size=size, error_message=str(e))

    def delete_dependencies(self, project: ProjectRecord) -> list[OperationResult]:
        """Remove every dependency path of *project*, in table order.

        Never raises for filesystem errors; failures are reported in the
        returned results.
        """
        results = []
        for path in project.dependency_dirs:
            try:
                operation, size = self.plan_operation(project, path)
            except OSError as e:
                operation = FileOperation(path=path, operation_type=OperationType.REMOVE, project=project)
                result = OperationResult(operation=operation, success=False, error_message=str(e))
            else:
                result = self.execute_operation(operation, size)

            if self.progress_callback:
                self.progress_callback(result)
            results.append(result)

        return results

    def delete_all(self, projects: Iterable[ProjectRecord]) -> list[OperationResult]:
        """Run delete_dependencies over *projects* in the given order"""
        results = []
        for project in projects:
            results.extend(self.delete_dependencies(project))
        return results
