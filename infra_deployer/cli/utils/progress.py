# infra_deployer/cli/utils/progress.py
"""Progress display utilities"""

from contextlib import contextmanager
from typing import Generator

from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TaskID,
)

from ...core.reporter import StatusReporter


class ProgressManager:
    """Centralized progress management"""

    def __init__(self, console: Console = None):
        self.console = console or Console()

    @contextmanager
    def multi_progress(self) -> Generator[Progress, None, None]:
        """Progress for multiple concurrent region deploys"""
        with Progress(
                SpinnerColumn(),
                TextColumn("[bold]{task.description}"),
                TextColumn("[dim]{task.fields[status]}"),
                TimeElapsedColumn(),
                console=self.console,
        ) as progress:
            yield progress


class RichTaskReporter(StatusReporter):
    """Status reporter showing the latest status line of one progress task"""

    def __init__(self, progress: Progress, task_id: TaskID):
        self.progress = progress
        self.task_id = task_id

    @classmethod
    def create(cls, progress: Progress, description: str) -> 'RichTaskReporter':
        task_id = progress.add_task(description, total=None, status="")
        return cls(progress, task_id)

    def update_status(self, message: str) -> None:
        self.progress.update(self.task_id, status=message)

    def finish(self, message: str = "") -> None:
        """Stop the spinner and keep the final line"""
        self.progress.update(self.task_id, status=message, total=1, completed=1)
