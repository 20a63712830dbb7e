"""Status reporting for deploy progress"""

import logging
from abc import ABC, abstractmethod
from typing import List


class StatusReporter(ABC):
    """Receives human-readable progress lines from a deploy delegate"""

    @abstractmethod
    def update_status(self, message: str) -> None:
        """Report a progress line"""
        pass


class LoggingStatusReporter(StatusReporter):
    """Reporter writing progress lines to a logger"""

    def __init__(self, name: str = "infra_deployer.progress", prefix: str = ""):
        self.logger = logging.getLogger(name)
        self.prefix = prefix

    def update_status(self, message: str) -> None:
        self.logger.info(f"{self.prefix}{message}")


class RecordingStatusReporter(StatusReporter):
    """Reporter keeping every progress line, for scripted callers"""

    def __init__(self):
        self.messages: List[str] = []

    def update_status(self, message: str) -> None:
        self.messages.append(message)
