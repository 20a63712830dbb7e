# infra_deployer/delegates/base.py
"""Deploy delegate interface"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..core.reporter import StatusReporter
from ..models.options import BootstrapOptions, DeployOptions
from ..models.result import BootstrapResult, DeployResult


@dataclass
class DeployDelegateInfo:
    """Deploy delegate metadata"""
    type: str
    description: str


class DeployDelegateBackend(ABC):
    """Base class for all deploy delegate implementations

    A backend deploys one environment per invoke. Domain failures are
    returned inside the DeployResult; raising is reserved for programming and
    integration errors.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    async def bootstrap(self, options: BootstrapOptions) -> BootstrapResult:
        """
        Prepare the infrastructure workspace and initial user config

        Args:
            options: Workspace, profile and initial user config

        Returns:
            Updated user config

        Raises:
            BootstrapError: If the workspace could not be prepared
        """
        pass

    @abstractmethod
    async def invoke(self, reporter: StatusReporter, options: DeployOptions) -> DeployResult:
        """
        Deploy the infrastructure of one environment

        Args:
            reporter: Progress reporter
            options: Deploy options of the environment

        Returns:
            Deploy result, successful or not
        """
        pass
