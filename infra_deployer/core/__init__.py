"""Core functionality for infra-deployer"""

from .reporter import StatusReporter, LoggingStatusReporter, RecordingStatusReporter
from .artifact_stager import ArtifactStager
from .stack_driver import StackLifecycleDriver, DEPLOY_ERROR_FALLBACK_MESSAGE

__all__ = [
    "StatusReporter",
    "LoggingStatusReporter",
    "RecordingStatusReporter",
    "ArtifactStager",
    "StackLifecycleDriver",
    "DEPLOY_ERROR_FALLBACK_MESSAGE",
]
