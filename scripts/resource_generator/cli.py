"""
Command-line interface for the resource generator.
Provides commands for generating strings and asset accessors.
"""

import os
import sys
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.table import Table

from .config import GeneratorConfig, DEFAULT_CONFIG_FILES, ENV_PREFIX
from .parsers import ResourceError
from .pipeline import ResourcePipeline, PipelineError, PipelineState
from .processing.asset_catalog import CatalogReadError, parse_asset_catalog
from .processing.renderer import (
    TemplateRenderer, RenderError, strings_context, assets_context,
    DEFAULT_STRINGS_TEMPLATE, DEFAULT_ASSETS_TEMPLATE
)
from .processing.strings_catalog import parse_strings, unify_entries
from .utils.locale import DEFAULT_DEVELOPMENT_LOCALE
from .utils.paths import MissingBasename

# Initialize typer app and rich console
app = typer.Typer(
    name="resource-generator",
    help="Resource generator - Generate typed accessors for localized strings and asset catalogs",
    add_completion=False,
    rich_markup_mode="rich",
    epilog="""
[bold]Examples:[/bold]
  [cyan]python scripts/generate_resources.py strings Resources/[/cyan]                 Generate string accessors
  [cyan]python scripts/generate_resources.py assets Assets.xcassets[/cyan]             Generate asset accessors
  [cyan]python scripts/generate_resources.py generate resource_generator.yaml[/cyan]   Run from a config file

[bold]Environment Variables:[/bold]
  Use [cyan]python scripts/generate_resources.py config --env-vars[/cyan] to see all available variables.
    """
)
console = Console()


@app.command()
def strings(
    path: Path = typer.Argument(..., help="Strings file or directory containing .strings/.xcstrings files"),
    output: Path = typer.Option(Path("Generated+Strings.swift"), "--output", "-o", help="Path of the generated file"),
    template_path: Optional[Path] = typer.Option(None, "--template-path", help="Custom template file"),
    development_locale: str = typer.Option(DEFAULT_DEVELOPMENT_LOCALE, "--development-locale", help="Locale whose .lproj directory is the base")
):
    """Generate accessors for localized strings."""
    try:
        catalogs = parse_strings(path, development_locale)
        table = unify_entries(catalogs)

        renderer = TemplateRenderer()
        content = renderer.render(
            strings_context(catalogs[0].filename, table),
            template_name=DEFAULT_STRINGS_TEMPLATE,
            template_path=template_path,
        )
        renderer.write_output(content, output)

    except (ResourceError, MissingBasename, RenderError) as e:
        console.print(f"[red]Error generating strings:[/red] {e}")
        raise typer.Exit(1)

    console.print("[green]✓[/green] Strings analysis complete")
    console.print(f"  - Strings: {len(table)}")
    console.print(f"\nGenerated code saved to: {output}")


@app.command()
def assets(
    path: Path = typer.Argument(..., help="Asset catalog (.xcassets) directory"),
    output: Path = typer.Option(Path("Generated+Assets.swift"), "--output", "-o", help="Path of the generated file"),
    template_path: Optional[Path] = typer.Option(None, "--template-path", help="Custom template file"),
    bundle: str = typer.Option("main", "--bundle", help="Bundle the assets ship in"),
    development_locale: str = typer.Option(DEFAULT_DEVELOPMENT_LOCALE, "--development-locale", help="Base locale for localized images")
):
    """Generate accessors for an asset catalog."""
    try:
        catalog = parse_asset_catalog(path, bundle=bundle, development_locale=development_locale)

        renderer = TemplateRenderer()
        content = renderer.render(
            assets_context(catalog),
            template_name=DEFAULT_ASSETS_TEMPLATE,
            template_path=template_path,
        )
        renderer.write_output(content, output)

    except (CatalogReadError, MissingBasename, RenderError) as e:
        console.print(f"[red]Error generating assets:[/red] {e}")
        raise typer.Exit(1)

    console.print("[green]✓[/green] Asset analysis complete")
    console.print(f"  - Images: {len(catalog.root.images)}")
    console.print(f"  - Colors: {len(catalog.root.colors)}")
    console.print(f"  - Data: {len(catalog.root.data_assets)}")
    console.print(f"\nGenerated code saved to: {output}")


@app.command()
def generate(
    config_file: Path = typer.Argument(..., help="Configuration file (.yaml, .toml or .json)")
):
    """Generate every output listed in a configuration file."""
    console.print("[bold blue]Generating resources...[/bold blue]")

    config = _load_config(config_file)

    errors = config.validate()
    if errors:
        console.print("[red]Configuration validation errors:[/red]")
        for error in errors:
            console.print(f"  • {error}")
        raise typer.Exit(1)

    pipeline = ResourcePipeline(config)
    try:
        state = pipeline.run()
    except PipelineError as e:
        console.print(f"[red]Generation failed:[/red] {e}")
        _display_pipeline_summary(pipeline.state)
        raise typer.Exit(1)

    _display_pipeline_summary(state)
    console.print("[green]✓[/green] Resource generation complete")


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    validate_config: bool = typer.Option(False, "--validate", help="Validate configuration file"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    env_vars: bool = typer.Option(False, "--env-vars", help="Show available environment variables")
):
    """Manage generator configuration."""
    if env_vars:
        _display_env_vars()
        return

    if not (show or validate_config):
        console.print("Use --show to display configuration, --validate to check it, or --env-vars to see environment variables.")
        return

    loaded = _load_config(config_file)

    if show:
        _display_config(loaded)

    if validate_config:
        errors = loaded.validate()
        if errors:
            console.print("[red]Configuration validation errors:[/red]")
            for error in errors:
                console.print(f"  • {error}")
            raise typer.Exit(1)
        console.print("[green]✓ Configuration is valid[/green]")


@app.command()
def version():
    """Show resource generator version information."""
    from . import __version__

    console.print("[bold]Resource Generator[/bold]")
    console.print(f"Version: {__version__}")
    console.print("Python: " + sys.version.split()[0])

    import jinja2
    import yaml

    table = Table(show_header=False)
    table.add_column("Package", style="cyan")
    table.add_column("Version", style="green")
    table.add_row("Jinja2", jinja2.__version__)
    table.add_row("PyYAML", yaml.__version__)
    table.add_row("Typer", typer.__version__)

    console.print("\n[bold]Dependencies:[/bold]")
    console.print(table)


def _load_config(config_file: Optional[Path]) -> GeneratorConfig:
    """Load configuration from file or use defaults with environment variable support."""
    loaded = None

    try:
        if config_file:
            if not config_file.exists():
                console.print(f"[red]Configuration file not found:[/red] {config_file}")
                raise typer.Exit(1)
            loaded = GeneratorConfig.from_file(config_file)
            console.print(f"[dim]Using configuration: {config_file}[/dim]")
        else:
            # Try to find default config files
            for config_path in DEFAULT_CONFIG_FILES:
                if config_path.exists():
                    console.print(f"[dim]Using configuration: {config_path}[/dim]")
                    loaded = GeneratorConfig.from_file(config_path)
                    break
    except ValueError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(1)

    if loaded is None:
        console.print("[dim]Using default configuration[/dim]")
        loaded = GeneratorConfig()

    # Apply environment variable overrides
    loaded = GeneratorConfig._apply_env_overrides(loaded)

    env_vars_used = [key for key in os.environ if key.startswith(ENV_PREFIX)]
    if env_vars_used:
        console.print(f"[dim]Environment overrides applied: {len(env_vars_used)} variables[/dim]")

    return loaded


def _display_pipeline_summary(state: PipelineState) -> None:
    """Display pipeline execution summary."""
    if not state.step_results:
        console.print("[yellow]No resource sections were processed.[/yellow]")
        return

    step_table = Table(title="Generation Summary")
    step_table.add_column("Step", style="cyan")
    step_table.add_column("Status", width=8)
    step_table.add_column("Duration", style="yellow")
    step_table.add_column("Details", style="dim")

    for step, result in state.step_results.items():
        status = "[green]✓[/green]" if result.success else "[red]✗[/red]"
        if result.success:
            details = ", ".join(
                f"{key}: {value}" for key, value in result.data.items() if key != "outputs"
            )
        else:
            details = result.message
        step_table.add_row(step.value, status, f"{result.duration:.2f}s", details)

    console.print(step_table)

    for path in state.output_files:
        console.print(f"Generated code saved to: {path}")


def _display_config(config: GeneratorConfig) -> None:
    """Display configuration in a formatted table."""
    table = Table(title="Resource Generator Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for section_name, section in (("Strings", config.strings), ("Asset Catalogs", config.xcassets)):
        if section is None:
            table.add_row(section_name, "not configured")
            continue
        table.add_row(f"{section_name} Inputs", ", ".join(section.inputs))
        for output in section.outputs:
            template = output.template_path or output.template_name or "default"
            table.add_row(f"{section_name} Output", f"{output.output} ({template})")

    table.add_row("Development Locale", config.development_locale)
    table.add_row("Bundle", config.bundle)
    table.add_row("Template Directory", config.template_dir or "built-in")

    console.print(table)


def _display_env_vars() -> None:
    """Display available environment variables for configuration."""
    table = Table(title="Resource Generator Environment Variables")
    table.add_column("Environment Variable", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Example", style="green")

    env_vars = [
        (f"{ENV_PREFIX}DEVELOPMENT_LOCALE", "Locale whose .lproj directory is the base", "Base"),
        (f"{ENV_PREFIX}BUNDLE", "Bundle reference for asset accessors", "main"),
        (f"{ENV_PREFIX}TEMPLATE_DIR", "Directory searched for named templates", "Templates"),
    ]

    for var_name, description, example in env_vars:
        table.add_row(var_name, description, example)

    console.print(table)
    console.print("\n[dim]Set these environment variables to override configuration file settings.[/dim]")


if __name__ == "__main__":
    app()
