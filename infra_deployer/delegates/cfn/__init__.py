"""CloudFormation deploy delegate"""

from .deployer import CfnDeployer
from .helper import CfnDeployHelper

__all__ = [
    'CfnDeployer',
    'CfnDeployHelper',
]
