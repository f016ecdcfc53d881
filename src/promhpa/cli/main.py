# src/promhpa/cli/main.py
"""
This module is the main entry point for the promhpa CLI.

It resolves the two autoscaling signals once and prints them, which is
handy to check a Prometheus/Kubernetes setup before pointing the
autoscaler at it.
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

import typer

from ..core import factory
from ..core.config import config
from ..core.exceptions import MetricsError
from ..core.metrics_client import PrometheusMetricsClient

# --- Setup Logger ---
logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

T = TypeVar("T")

app = typer.Typer(
    name="promhpa",
    help="Prometheus-backed CPU utilization and custom metrics for the Horizontal Pod Autoscaler.",
    add_completion=False,
)


def version_callback(value: bool):
    """
    Prints the version of promhpa.
    """
    if value:
        from .. import __version__

        typer.echo(f"promhpa version: {__version__}")
        raise typer.Exit()


def _run(call: Callable[[PrometheusMetricsClient], Awaitable[T]]) -> T:
    """Run one client call on a fresh event loop, closing the client afterwards."""

    async def _with_client():
        client = factory.get_metrics_client()
        try:
            return await call(client)
        finally:
            await client.close()

    try:
        return asyncio.run(_with_client())
    except MetricsError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command()
def cpu(
    namespace: str = typer.Option("default", "--namespace", "-n", help="Namespace of the pods."),
    selector: str = typer.Option("", "--selector", "-l", help="Label selector, e.g. 'app=web'."),
):
    """
    Show the average CPU utilization of the selected pods, as a percent of requested CPU.
    """
    result = _run(lambda client: client.get_cpu_utilization(namespace, selector))
    typer.echo(f"{result.percentage}% (observed at {result.timestamp.isoformat()})")


@app.command()
def custom(
    metric_name: str = typer.Argument(..., help="Name of the custom metric."),
    namespace: str = typer.Option("default", "--namespace", "-n", help="Namespace of the pods."),
    selector: str = typer.Option("", "--selector", "-l", help="Label selector, e.g. 'app=web'."),
):
    """
    Show the per-pod average of a custom metric over the selected pods.
    """
    result = _run(lambda client: client.get_custom_metric(metric_name, namespace, selector))
    if result is None:
        typer.echo(f"No pods match selector '{selector}' in namespace '{namespace}'.")
        return
    typer.echo(f"{metric_name}: {result.value:g} (observed at {result.timestamp.isoformat()})")


@app.command()
def version():
    """
    Show the version of promhpa.
    """
    from .. import __version__

    typer.echo(f"promhpa version: {__version__}")


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """
    promhpa CLI main entry point.
    """
    pass


if __name__ == "__main__":
    app()
