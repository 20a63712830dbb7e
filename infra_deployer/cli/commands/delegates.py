"""Deploy delegate listing command"""

import click

from ..utils.output import format_delegate_list
from ...delegates.contract import deploy_delegate_registry


@click.command()
def delegates():
    """List the registered deploy delegate types

    Use one of the listed types as skillInfrastructure.type in
    ask-resources.yaml.
    """
    format_delegate_list(deploy_delegate_registry.list_delegates())
