"""Bootstrap command implementation"""

import sys
from pathlib import Path

import click
from rich.console import Console

from ..utils.output import format_bootstrap_result
from ...api.exceptions import InfraDeployerError
from ...core.infrastructure_controller import InfrastructureController
from ...models.config import ResourcesConfig
from ...utils.async_utils import run_async

console = Console()


@click.command()
@click.option('-p', '--profile', default='default', show_default=True,
              help='Profile in the resources file to bootstrap')
@click.option('--workspace', type=click.Path(file_okay=False, path_type=Path),
              help='Infrastructure workspace (default: infrastructure/<delegate name>)')
@click.pass_context
def bootstrap(ctx, profile, workspace):
    """Prepare the infrastructure workspace of a profile

    Writes the deploy delegate's starter template into the workspace and
    saves the resulting user config to ask-resources.yaml.

    Example:

        infra-deployer bootstrap --profile default
    """
    try:
        resources = ResourcesConfig.load(ctx.obj.project_root)
        controller = InfrastructureController(resources, profile)
        workspace = workspace or controller.get_default_workspace_path()

        with console.status(f"Bootstrapping {workspace}..."):
            result = run_async(controller.bootstrap_infrastructure(workspace))

        format_bootstrap_result(result, str(workspace))

    except InfraDeployerError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
