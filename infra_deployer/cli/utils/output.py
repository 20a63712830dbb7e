# infra_deployer/cli/utils/output.py
"""Output formatting utilities"""

from typing import Dict, List

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ...constants import EMOJI_SUCCESS, EMOJI_ERROR, EMOJI_WARNING, EMOJI_SKIPPED
from ...delegates.base import DeployDelegateInfo
from ...models import BootstrapResult, DeployResult

console = Console()


def _result_status(result: DeployResult) -> str:
    if result.is_deploy_skipped:
        return f"[blue]{EMOJI_SKIPPED} Skipped[/blue]"
    if result.is_all_step_success:
        return f"[green]{EMOJI_SUCCESS} Deployed[/green]"
    if result.is_partial:
        return f"[yellow]{EMOJI_WARNING} Code only[/yellow]"
    return f"[red]{EMOJI_ERROR} Failed[/red]"


def format_deploy_results(results: Dict[str, DeployResult]) -> None:
    """Display the per-region deploy results as a table"""
    table = Table(title="Skill Infrastructure", box=box.ROUNDED)
    table.add_column("Region", style="cyan")
    table.add_column("Status")
    table.add_column("Endpoint", style="green")
    table.add_column("Stack", style="dim", overflow="fold")

    for region, result in results.items():
        table.add_row(
            region,
            _result_status(result),
            result.endpoint.uri if result.endpoint else "-",
            result.deploy_state.stack_id or "-"
        )

    console.print(table)

    for result in results.values():
        if result.result_message:
            console.print(f"  {result.result_message}")


def format_bootstrap_result(result: BootstrapResult, workspace: str) -> None:
    """Display the user config produced by bootstrap"""
    lines = [
        f"[green]{EMOJI_SUCCESS}[/green] Infrastructure workspace prepared!",
        "",
        f"[bold]Workspace:[/bold] {workspace}",
    ]
    for key, value in result.user_config.items():
        lines.append(f"[bold]{key}:[/bold] {value}")

    panel = Panel(
        "\n".join(lines),
        title="Bootstrap Result",
        border_style="green"
    )
    console.print(panel)


def format_delegate_list(delegates: List[DeployDelegateInfo]) -> None:
    """Display registered deploy delegate types"""
    if not delegates:
        console.print("[yellow]No deploy delegates registered[/yellow]")
        return

    table = Table(title="Deploy Delegates", box=box.SIMPLE)
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Description")

    for info in delegates:
        table.add_row(info.type, info.description or "-")

    console.print(table)
