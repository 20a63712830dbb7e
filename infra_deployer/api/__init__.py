# infra_deployer/api/__init__.py
"""API layer for infra-deployer"""

from .exceptions import (
    InfraDeployerError,
    ConfigError,
    ProfileNotFoundError,
    CfnDeployerError,
    StackDeployTimeoutError,
    BootstrapError,
    DeployDelegateError,
    InvalidDeployDelegateError,
    DeployDelegateNotInstantiatedError,
    DeployDelegateResponseError,
    DeployDelegateLoadError,
    InfrastructureDeployError,
)

__all__ = [
    # Exceptions
    "InfraDeployerError",
    "ConfigError",
    "ProfileNotFoundError",
    "CfnDeployerError",
    "StackDeployTimeoutError",
    "BootstrapError",
    "DeployDelegateError",
    "InvalidDeployDelegateError",
    "DeployDelegateNotInstantiatedError",
    "DeployDelegateResponseError",
    "DeployDelegateLoadError",
    "InfrastructureDeployError",
]
