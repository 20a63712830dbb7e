"""Infra Deployer - deploy Alexa skill infrastructure through pluggable deploy delegates.

The built-in CloudFormation delegate stages the skill code in a versioned S3
bucket and drives a CloudFormation stack per Alexa region, reporting progress
until the stack settles.
"""

from .__version__ import __version__, __version_info__, __license__

# Orchestration
from .core.infrastructure_controller import InfrastructureController
from .core.reporter import StatusReporter, LoggingStatusReporter

# Deploy delegates
from .delegates import (
    DeployDelegate,
    DeployDelegateBackend,
    DeployDelegateRegistry,
    deploy_delegate_registry,
    load_deploy_delegate,
)

# Data models
from .models import (
    DeployOptions,
    CodeOptions,
    BootstrapOptions,
    DeployResult,
    DeployState,
    BootstrapResult,
    UserConfig,
    ResourcesConfig,
)

# Exceptions
from .api.exceptions import (
    InfraDeployerError,
    ConfigError,
    CfnDeployerError,
    StackDeployTimeoutError,
    BootstrapError,
    DeployDelegateError,
    InfrastructureDeployError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__license__",

    # Orchestration
    "InfrastructureController",
    "StatusReporter",
    "LoggingStatusReporter",

    # Deploy delegates
    "DeployDelegate",
    "DeployDelegateBackend",
    "DeployDelegateRegistry",
    "deploy_delegate_registry",
    "load_deploy_delegate",

    # Data models
    "DeployOptions",
    "CodeOptions",
    "BootstrapOptions",
    "DeployResult",
    "DeployState",
    "BootstrapResult",
    "UserConfig",
    "ResourcesConfig",

    # Exceptions
    "InfraDeployerError",
    "ConfigError",
    "CfnDeployerError",
    "StackDeployTimeoutError",
    "BootstrapError",
    "DeployDelegateError",
    "InfrastructureDeployError",
]
