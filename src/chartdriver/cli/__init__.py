"""Main CLI application module.

Commands:
- deploy: Sync chart repositories and install every release in a cluster config
- validate: Load a cluster config and summarize what would be deployed

Every deploy option can also be set through a ``PLUGIN_*`` environment
variable so the tool runs unchanged as a CI pipeline step.
"""

import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich.table import Table

from chartdriver.config import ClusterConfig, load_cluster_config, load_env_file
from chartdriver.deployment import ClusterDeployer

from .console import CLIConsole, console, with_error_handling

# Create the main CLI application
app = typer.Typer(
    help="Deploy Helm charts to a cluster from a declarative config",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

ConfigOption = Annotated[
    Path,
    typer.Option(
        "--config",
        "-c",
        envvar="PLUGIN_CONFIG",
        help="Cluster configuration file",
    ),
]


def configure_logging(verbose: bool) -> None:
    """Send loguru output to stderr at INFO, or DEBUG when verbose."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log every command line (secrets masked)")
    ] = False,
) -> None:
    configure_logging(verbose)


@app.command()
@with_error_handling
def deploy(
    config: ConfigOption = Path("cluster.yaml"),
    values: Annotated[
        list[str] | None,
        typer.Option(
            "--values",
            "-f",
            envvar="PLUGIN_VALUES",
            help=(
                "Value file applied to every release (repeatable; "
                "whitespace-separated in PLUGIN_VALUES)"
            ),
        ),
    ] = None,
    kubeconfig: Annotated[
        str | None,
        typer.Option(
            "--kubeconfig",
            envvar="PLUGIN_KUBE_CONFIG",
            help="Kube-config contents; written over ~/.kube/config",
        ),
    ] = None,
    kube_context: Annotated[
        str | None,
        typer.Option("--kube-context", envvar="PLUGIN_KUBE_CONTEXT", help="Context to use"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", envvar="PLUGIN_DRY_RUN", help="Simulate the installs"),
    ] = False,
    env_file: Annotated[
        Path, typer.Option("--env-file", help="Env file loaded before resolving secrets")
    ] = Path(".env"),
) -> None:
    """Sync chart repositories and install all releases."""
    load_env_file(env_file)
    cluster = load_cluster_config(config)

    console.print_header(f"Deploying {cluster.name or config.name}")
    if dry_run:
        console.warn("Dry run: nothing will be changed on the cluster")

    deployer = ClusterDeployer(
        console,
        cluster,
        value_files=values or [],
        kube_config=kubeconfig,
        kube_context=kube_context,
        dry_run=dry_run,
    )
    deployer.deploy()

    console.print("\n[bold green]🎉 Deployment complete![/bold green]")


@app.command()
@with_error_handling
def validate(config: ConfigOption = Path("cluster.yaml")) -> None:
    """Check a cluster config and show what it would deploy."""
    cluster = load_cluster_config(config)
    _show_summary(console, cluster)
    console.ok(f"{config} is valid")


def _show_summary(out: CLIConsole, cluster: ClusterConfig) -> None:
    repos = Table(title="Helm repositories")
    repos.add_column("Name", style="cyan")
    repos.add_column("URL")
    repos.add_column("Auth")
    for repo in cluster.helm.repos:
        repos.add_row(repo.name, repo.url, "yes" if repo.username or repo.password else "")
    out.print(repos)

    releases = Table(title=f"Releases for {cluster.name or '<unnamed cluster>'}")
    releases.add_column("#", justify="right")
    releases.add_column("Release", style="cyan")
    releases.add_column("Chart")
    releases.add_column("Version")
    releases.add_column("Namespace")
    releases.add_column("Method")
    for position, release in enumerate(cluster.releases, 1):
        releases.add_row(
            str(position),
            release.name,
            release.chart_path,
            release.version,
            release.namespace,
            "kubectl" if release.uses_kubectl else "helm",
        )
    out.print(releases)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
