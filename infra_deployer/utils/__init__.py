# infra_deployer/utils/__init__.py
"""Utility functions for infra-deployer"""

from .hash_utils import hash_code_build

from .async_utils import (
    run_async,
    run_blocking,
)

from .aws_utils import (
    AwsCredentials,
    ProfileResolver,
    get_cli_config_path,
)

from .string_utils import filter_non_alphanumeric

__all__ = [
    # Hash utilities
    "hash_code_build",

    # Async utilities
    "run_async",
    "run_blocking",

    # AWS utilities
    "AwsCredentials",
    "ProfileResolver",
    "get_cli_config_path",

    # String utilities
    "filter_non_alphanumeric",
]
