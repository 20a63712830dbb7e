# infra_deployer/cli/main.py
"""Main CLI entry point for infra-deployer"""

import sys
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from ..__version__ import __version__
from ..constants import APP_NAME, LOG_FORMAT
from ..api.exceptions import InfraDeployerError
from .commands import (
    deploy,
    bootstrap,
    delegates,
)

console = Console()

# SDK loggers that are only interesting with --debug
NOISY_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3", "asyncio", "aiofiles")


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Route log records through rich, at INFO with --verbose and DEBUG with --debug"""
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class Context:
    """Options shared by every command"""

    def __init__(self, project_root: Path, verbose: bool = False, debug: bool = False):
        self.project_root = project_root
        self.verbose = verbose
        self.debug = debug


@click.group(name=APP_NAME)
@click.version_option(__version__, prog_name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Log each deploy step')
@click.option('-d', '--debug', is_flag=True, help='Log SDK level details and show tracebacks')
@click.option('-q', '--quiet', is_flag=True, help='Only print results and errors')
@click.option('-C', '--project-dir', type=click.Path(file_okay=False, path_type=Path),
              default=Path('.'), help='Skill project directory containing ask-resources.yaml')
@click.pass_context
def cli(ctx, verbose, debug, quiet, project_dir):
    """Infra Deployer - Deploy Alexa skill infrastructure

    Uploads the built skill code to a versioned S3 bucket and deploys the
    skill's AWS resources as a CloudFormation stack, one per Alexa region,
    through the deploy delegate configured in ask-resources.yaml.
    """
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context(project_dir, verbose=verbose, debug=debug)


cli.add_command(deploy.deploy)
cli.add_command(bootstrap.bootstrap)
cli.add_command(delegates.delegates)


def main():
    """Console script entry point

    Commands report their own failures; anything reaching this point is
    either an interrupt or an error no command anticipated.
    """
    try:
        cli(prog_name=APP_NAME)
    except KeyboardInterrupt:
        console.print("\n[yellow]Deploy interrupted, stacks already submitted keep running in CloudFormation[/yellow]")
        sys.exit(130)
    except InfraDeployerError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
