"""AWS service clients"""

from .cloudformation import CloudFormationClient

__all__ = [
    'CloudFormationClient',
]
