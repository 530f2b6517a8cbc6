"""Main CLI interface using Typer."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..core import ScannerService
from ..errors import ScanError
from ..k8s import K8sClient
from ..model.config import ScanConfig
from ..model.report import ScanSummary
from ..utils.logger import get_logger, set_log_level

# Create CLI app
app = typer.Typer(
    name="cvscan",
    help="Write a file-based snapshot of every object in a Kubernetes cluster",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


def _print_summary(summary: ScanSummary, output: Path) -> None:
    """Print scan statistics in a formatted table."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")

    table.add_row("Resource types", str(summary.resource_types))
    table.add_row("Types skipped on benign errors", str(len(summary.tolerated_types)))
    table.add_row("Objects written", str(len(summary.written_files)))
    for reason, count in sorted(summary.suppressed.items(), key=lambda kv: kv[0].value):
        table.add_row(f"Suppressed ({reason.value})", str(count))

    console.print(table)
    console.print(f"Snapshot written to [cyan]{output}[/cyan]")


def build_config(
    config_file: Optional[Path],
    namespace: Optional[str],
    selector: Optional[str],
    output: Optional[Path],
    cluster_wide_only: Optional[bool],
    context: Optional[str],
    kubeconfig: Optional[Path],
) -> ScanConfig:
    """Load the config file, if any, and apply command line overrides."""
    config = ScanConfig.load(config_file) if config_file else ScanConfig()

    overrides = {
        "namespace": namespace,
        "label_selector": selector,
        "output_dir": output,
        "cluster_wide_only": cluster_wide_only,
        "context": context,
        "kubeconfig": kubeconfig,
    }
    return config.model_copy(update={k: v for k, v in overrides.items() if v is not None})


@app.command()
def scan(
    namespace: Optional[str] = typer.Option(
        None, "--namespace", "-n", help="Kubernetes namespace to scan (default: all namespaces)"
    ),
    selector: Optional[str] = typer.Option(
        None, "--selector", "-l", help="Label selector passed to every list call"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output directory for snapshot files"
    ),
    cluster_wide_only: Optional[bool] = typer.Option(
        None,
        "--cluster-wide-only/--all-scopes",
        help="Only scan cluster-scoped resource types",
    ),
    context: Optional[str] = typer.Option(
        None, "--context", "-c", help="Kubernetes context to use"
    ),
    kubeconfig: Optional[Path] = typer.Option(
        None, "--kubeconfig", help="Path to the kubeconfig file"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="YAML or JSON file with scan settings"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Scan the cluster and write one file per object plus caps.json."""
    if verbose:
        set_log_level(logging.DEBUG)

    try:
        config = build_config(
            config_file, namespace, selector, output, cluster_wide_only, context, kubeconfig
        )

        if config.namespace:
            console.print(f"Namespace: [cyan]{config.namespace}[/cyan]")
        else:
            console.print("Scanning [cyan]all namespaces[/cyan]")

        with console.status("[bold green]Scanning Kubernetes cluster..."):
            client = K8sClient(
                context=config.context,
                kubeconfig=str(config.kubeconfig) if config.kubeconfig else None,
            )
            summary = ScannerService(client, config).run()

        _print_summary(summary, config.output_dir)
    except ScanError as e:
        logger.debug("Scan failed", exc_info=True)
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(1)


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold]cvscan[/bold] version {__version__}")


if __name__ == "__main__":
    app()
