# infra_deployer/delegates/__init__.py
"""Deploy delegates for infra-deployer"""

from .base import DeployDelegateBackend, DeployDelegateInfo
from .contract import (
    DeployDelegate,
    DeployDelegateRegistry,
    deploy_delegate_registry,
    load_deploy_delegate,
)

__all__ = [
    # Base classes
    'DeployDelegateBackend',
    'DeployDelegateInfo',

    # Contract
    'DeployDelegate',
    'DeployDelegateRegistry',

    # Global instance
    'deploy_delegate_registry',
    'load_deploy_delegate',
]
