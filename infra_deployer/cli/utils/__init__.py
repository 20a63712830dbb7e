"""CLI utility functions"""

from .progress import (
    ProgressManager,
    RichTaskReporter,
)
from .output import (
    format_deploy_results,
    format_bootstrap_result,
    format_delegate_list,
)

__all__ = [
    # Progress utilities
    'ProgressManager',
    'RichTaskReporter',

    # Output formatting
    'format_deploy_results',
    'format_bootstrap_result',
    'format_delegate_list',
]
