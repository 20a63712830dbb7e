"""Deploy command implementation"""

import sys

import click
from rich.console import Console

from ..utils.output import format_deploy_results
from ..utils.progress import ProgressManager, RichTaskReporter
from ...api.exceptions import InfraDeployerError, InfrastructureDeployError
from ...core.infrastructure_controller import InfrastructureController
from ...models.config import ResourcesConfig
from ...utils.async_utils import run_async

console = Console()


@click.command()
@click.option('-p', '--profile', default='default', show_default=True,
              help='Profile in the resources file to deploy')
@click.option('--ignore-hash', is_flag=True,
              help='Upload the code even if it has not changed since the last deploy')
@click.pass_context
def deploy(ctx, profile, ignore_hash):
    """Deploy the skill infrastructure of a profile

    Every Alexa region listed under the profile's "code" section is deployed
    concurrently by the profile's deploy delegate. The resulting deploy state
    is written back to ask-resources.yaml, including the partial state of
    regions that failed.

    Examples:

        # Deploy the default profile
        infra-deployer deploy

        # Redeploy code that has not changed
        infra-deployer deploy --profile prod --ignore-hash
    """
    reporters = {}

    try:
        resources = ResourcesConfig.load(ctx.obj.project_root)

        with ProgressManager(console).multi_progress() as progress:
            def reporter_factory(region: str) -> RichTaskReporter:
                reporter = RichTaskReporter.create(
                    progress, f'Deploy Alexa skill infrastructure for region "{region}"'
                )
                reporters[region] = reporter
                return reporter

            controller = InfrastructureController(
                resources,
                profile,
                reporter_factory=reporter_factory,
                ignore_hash=ignore_hash
            )
            try:
                results = run_async(controller.deploy_infrastructure())
            finally:
                for reporter in reporters.values():
                    reporter.finish()

        format_deploy_results(results)
        console.print(f"\n[green]✓ Skill infrastructure deployed for profile {profile}[/green]")

    except InfrastructureDeployError as e:
        console.print("\n[red]✗ Skill infrastructure deploy failed:[/red]")
        for failure in e.failures:
            console.print(f"  [red]•[/red] {failure}")
        sys.exit(1)
    except InfraDeployerError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
