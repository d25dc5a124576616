"""Shipcat CLI entrypoint."""
import logging
from typing import List, Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from shipcat.config.loader import ConfigLoader
from shipcat.errors import ShipcatError
from shipcat.manifest.catalog import ServiceCatalog
from shipcat.pipeline.resolver import ManifestResolver
from shipcat.render.generate import Deployment, deployment, helm_values
from shipcat.render.renderer import JinjaRenderer
from shipcat.vault.client import VaultClient

app = typer.Typer(help="Shipcat - resolve, validate and render service manifests")
console = Console(stderr=True)

ConfigOpt = typer.Option("shipcat.conf", "--config", "-c", help="Path to the global shipcat config")
ServicesDirOpt = typer.Option("services", "--services-dir", help="Folder holding one sub folder per service")
RegionOpt = typer.Option(..., "--region", "-r", help="Region to resolve manifests for")


@app.callback()
def setup(debug: bool = typer.Option(False, "--debug", help="Print verbose debug information")):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _resolver(config: str, services_dir: str, secrets: bool) -> ManifestResolver:
    conf = ConfigLoader.load(config)
    store = VaultClient.from_env() if secrets else None
    return ManifestResolver(conf, services_dir, secret_store=store)


def _fail(e: ShipcatError) -> None:
    console.print(f"[bold red]Error: {e}[/]")
    raise typer.Exit(code=1)


@app.command("validate")
def validate(
    services: Optional[List[str]] = typer.Argument(None, help="Services to validate (default: all)"),
    region: str = RegionOpt,
    config: str = ConfigOpt,
    services_dir: str = ServicesDirOpt,
    secrets: bool = typer.Option(False, "--secrets/--no-secrets", help="Also resolve IN_VAULT secrets"),
):
    """Validate service manifests for a region."""
    try:
        resolver = _resolver(config, services_dir, secrets)
        names = services or ServiceCatalog(services_dir).list_services()
        resolver.validate(names, region)
        console.print(f"[green]Validated {len(names)} service(s) for {region}[/]")
    except ShipcatError as e:
        _fail(e)


@app.command("values")
def values(
    service: str = typer.Argument(..., help="Service to emit helm values for"),
    region: str = RegionOpt,
    output: Optional[str] = typer.Option(None, "--output", "-o", help="File to write values to (default: stdout)"),
    tag: Optional[str] = typer.Option(None, "--tag", help="Override the image version"),
    config: str = ConfigOpt,
    services_dir: str = ServicesDirOpt,
    templates_dir: str = typer.Option("templates", "--templates-dir", help="Shared templates folder"),
    secrets: bool = typer.Option(True, "--secrets/--no-secrets", help="Resolve IN_VAULT secrets"),
):
    """Emit helm values for a service."""
    try:
        resolver = _resolver(config, services_dir, secrets)
        mf = resolver.completed(service, region)
        dep = Deployment(
            service=service,
            region=region,
            manifest=mf,
            renderer=JinjaRenderer.for_service(service, services_dir, templates_dir),
            version=tag,
        )
        helm_values(dep, output)
    except ShipcatError as e:
        _fail(e)


@app.command("generate")
def generate(
    service: str = typer.Argument(..., help="Service to render the deployment for"),
    region: str = RegionOpt,
    stdout: bool = typer.Option(True, "--stdout/--no-stdout", help="Print the rendered deployment"),
    to_file: bool = typer.Option(False, "--file", help="Write OUTPUT/values.yaml"),
    tag: Optional[str] = typer.Option(None, "--tag", help="Override the image version"),
    config: str = ConfigOpt,
    services_dir: str = ServicesDirOpt,
    templates_dir: str = typer.Option("templates", "--templates-dir", help="Shared templates folder"),
    secrets: bool = typer.Option(True, "--secrets/--no-secrets", help="Resolve IN_VAULT secrets"),
):
    """Render the deployment template for a service."""
    try:
        resolver = _resolver(config, services_dir, secrets)
        mf = resolver.completed(service, region)
        dep = Deployment(
            service=service,
            region=region,
            manifest=mf,
            renderer=JinjaRenderer.for_service(service, services_dir, templates_dir),
            version=tag,
        )
        dep.check()
        deployment(dep, to_stdout=stdout, to_file=to_file)
    except ShipcatError as e:
        _fail(e)


@app.command("gdpr")
def gdpr(
    service: str = typer.Argument(..., help="Service to show data handling for"),
    region: str = RegionOpt,
    config: str = ConfigOpt,
    services_dir: str = ServicesDirOpt,
):
    """Show the cascaded data handling policy of a service."""
    try:
        resolver = _resolver(config, services_dir, secrets=False)
        typer.echo(resolver.gdpr(service, region), nl=False)
    except ShipcatError as e:
        _fail(e)


@app.command("show")
def show(
    service: str = typer.Argument(..., help="Service to show"),
    region: str = RegionOpt,
    config: str = ConfigOpt,
    services_dir: str = ServicesDirOpt,
):
    """Print a resolved manifest without secrets."""
    try:
        resolver = _resolver(config, services_dir, secrets=False)
        mf = resolver.completed(service, region)
        typer.echo(yaml.safe_dump(mf.to_values(), sort_keys=False), nl=False)
    except ShipcatError as e:
        _fail(e)


@app.command("list")
def list_services(
    config: str = ConfigOpt,
    services_dir: str = ServicesDirOpt,
):
    """List services and the regions they deploy to."""
    try:
        resolver = _resolver(config, services_dir, secrets=False)
        table = Table(title="Services")
        table.add_column("Service", style="cyan")
        table.add_column("Regions")
        for name in ServiceCatalog(services_dir).list_services():
            mf = resolver.load(name)
            table.add_row(name, ", ".join(mf.regions))
        Console().print(table)
    except ShipcatError as e:
        _fail(e)


if __name__ == "__main__":
    app()
