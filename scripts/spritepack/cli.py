"""
Command-line interface for spritepack.
Packs sprites into atlases and exports their layouts.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .atlas import Atlas
from .config import ENV_VARS, AtlasOptions, ConfigError, ProjectConfig
from .processing.validator import AtlasValidator
from .project import Project

app = typer.Typer(
    name="spritepack",
    help="Sprite atlas packer - pack images into textures and export their layout",
    add_completion=False,
    rich_markup_mode="rich",
    epilog="""
[bold]Examples:[/bold]
  [cyan]spritepack export project.toml[/cyan]                   Export every atlas of a project
  [cyan]spritepack pack *.png -o sheet.json --padding 2[/cyan]  Pack images into one atlas
  [cyan]spritepack info project.toml[/cyan]                     Show atlases and packed sizes

[bold]Environment Variables:[/bold]
  Use [cyan]spritepack config --env-vars[/cyan] to see all available variables.
    """
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")
):
    """Sprite atlas packer."""
    _setup_logging(verbose)


@app.command()
def export(
    project_file: Path = typer.Argument(..., help="Project file (.toml or .json)")
):
    """Export every atlas of a project."""
    project = _load_project(project_file)

    console.print(f"[bold blue]Exporting {len(project.atlases)} atlases...[/bold blue]")

    if not project.export_all():
        console.print("[red]✗[/red] Failed to export atlases")
        raise typer.Exit(1)

    for atlas in project.atlases:
        console.print(f"[green]✓[/green] {atlas.options.output_file} "
                      f"({atlas.width}x{atlas.height}, {len(atlas.sprites)} sprites)")


@app.command()
def pack(
    sprites: List[Path] = typer.Argument(..., help="Sprite image files, in output order"),
    output: Path = typer.Option(Path("untitled.atlas"), "--output", "-o", help="Layout file path"),
    image: Optional[Path] = typer.Option(None, "--image", "-i", help="Texture path (defaults to the layout path)"),
    image_format: str = typer.Option("png", "--format", "-f", help="Texture format: png, tga or bmp"),
    exporter: Optional[str] = typer.Option(None, "--exporter", "-e", help="Layout format: atlas, txt or json"),
    padding: int = typer.Option(0, "--padding", "-p", help="Padding in pixels around each sprite"),
    mode: str = typer.Option("bleed", "--mode", "-m", help="Padding fill: bleed, alpha or debug"),
    square: bool = typer.Option(False, "--square", help="Force a square texture"),
    normalize: bool = typer.Option(False, "--normalize", help="Normalized sprite coordinates"),
    y_up: bool = typer.Option(False, "--y-up", help="Origin at the bottom left corner"),
    animation: Optional[str] = typer.Option(None, "--animation", "-a", help="Put every sprite in this animation group"),
    frame_time: float = typer.Option(0.1, "--frame-time", help="Seconds per frame for --animation"),
):
    """Pack image files into a single atlas."""
    if exporter is None:
        exporter = "json" if output.suffix.lower() == ".json" else "atlas"

    try:
        options = AtlasOptions.from_dict({
            'output_file': str(output),
            'image_format': image_format,
            'exporter': exporter,
            'padding': padding,
            'padding_mode': mode,
            'square_texture': square,
            'normalize': normalize,
            'y_up': y_up,
        }, base=AtlasOptions.default())
    except ConfigError as e:
        console.print(f"[red]Invalid option:[/red] {e.message}")
        raise typer.Exit(1)

    options.output_image = str(image) if image else str(output.with_suffix("." + options.image_format.extension))

    errors = options.validate()
    if errors:
        _print_errors("Invalid options:", errors)
        raise typer.Exit(1)

    atlas = Atlas(options)
    group = atlas.add_animation(animation, frame_time) if animation else 0

    for sprite_path in sprites:
        if not atlas.load_sprite(sprite_path, group):
            console.print(f"[yellow]Warning:[/yellow] Skipping unreadable image {sprite_path}")

    if not atlas.export():
        console.print("[red]✗[/red] Failed to export atlas")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Packed {len(atlas.sprites)} sprites into "
                  f"{atlas.width}x{atlas.height} {options.output_image}")
    console.print(f"[green]✓[/green] Wrote layout to {options.output_file}")


@app.command()
def info(
    project_file: Path = typer.Argument(..., help="Project file (.toml or .json)")
):
    """Show the atlases of a project and their packed sizes."""
    project = _load_project(project_file)

    table = Table(title=f"Atlases in {project_file}")
    table.add_column("Layout", style="cyan")
    table.add_column("Texture", style="cyan")
    table.add_column("Exporter")
    table.add_column("Sprites", justify="right")
    table.add_column("Animations", justify="right")
    table.add_column("Padding")
    table.add_column("Size", style="green")

    for atlas in project.atlases:
        packed = atlas.packed_result() is not None
        options = atlas.options
        table.add_row(
            options.output_file,
            f"{options.output_image} ({options.image_format.name})",
            options.exporter,
            str(len(atlas.sprites)),
            str(len(atlas.animations) - 1),
            f"{options.padding}px {options.padding_mode.value}",
            f"{atlas.width}×{atlas.height}" if packed else "[red]failed[/red]",
        )

    console.print(table)


@app.command()
def validate(
    project_file: Path = typer.Argument(..., help="Project file (.toml or .json)"),
    power_of_two: bool = typer.Option(False, "--power-of-two", help="Require power-of-two textures")
):
    """Pack every atlas of a project and check the resulting layouts."""
    project = _load_project(project_file)
    validator = AtlasValidator(power_of_two=power_of_two)
    failed = False

    for atlas in project.atlases:
        name = atlas.options.output_file
        result = atlas.packed_result()
        if result is None:
            console.print(f"[red]✗[/red] {name}: packing failed")
            failed = True
            continue

        errors = validator.validate_layout(atlas.candidates(), result)
        if errors:
            _print_errors(f"{name}: layout errors", errors)
            failed = True
        else:
            console.print(f"[green]✓[/green] {name}: {len(atlas.sprites)} sprites in "
                          f"{result.width}x{result.height}")

    if failed:
        raise typer.Exit(1)


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show default atlas options"),
    project_file: Optional[Path] = typer.Option(None, "--validate", help="Validate a project file"),
    env_vars: bool = typer.Option(False, "--env-vars", help="Show available environment variables")
):
    """Inspect configuration."""
    if env_vars:
        _display_env_vars()
        return

    if show:
        try:
            _display_options(AtlasOptions.default())
        except ConfigError as e:
            console.print(f"[red]Invalid environment override:[/red] {e.message}")
            raise typer.Exit(1)

    if project_file is not None:
        try:
            errors = ProjectConfig.from_file(project_file).validate()
        except (FileNotFoundError, ConfigError) as e:
            console.print(f"[red]Error loading project:[/red] {e}")
            raise typer.Exit(1)

        if errors:
            _print_errors("Configuration validation errors:", errors)
            raise typer.Exit(1)
        console.print("[green]✓ Configuration is valid[/green]")

    if not (show or project_file):
        console.print("Use --show to display default options, --validate to check a project, "
                      "or --env-vars to see environment variables.")


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold]spritepack[/bold] {__version__}")
    console.print("Python: " + sys.version.split()[0])


def _setup_logging(verbose: bool = False) -> logging.Logger:
    """Set up logging for the command line."""
    logger = logging.getLogger("spritepack")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        logger.addHandler(handler)
    else:
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler):
                handler.setStream(sys.stderr)

    return logger


def _load_project(project_file: Path) -> Project:
    """Load a project or exit with an error message."""
    try:
        project = Project.load(project_file)
    except FileNotFoundError:
        console.print(f"[red]Project file not found:[/red] {project_file}")
        raise typer.Exit(1)
    except ConfigError as e:
        console.print(f"[red]Invalid project file:[/red] {e.message}")
        raise typer.Exit(1)

    if not project.atlases:
        console.print(f"[yellow]No atlases defined in {project_file}[/yellow]")
        raise typer.Exit(1)

    return project


def _print_errors(title: str, errors: List[str]) -> None:
    console.print(f"[red]{title}[/red]")
    for error in errors:
        console.print(f"  • {error}")


def _display_options(options: AtlasOptions) -> None:
    """Display atlas options in a formatted table."""
    table = Table(title="Default Atlas Options")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in options.to_dict().items():
        table.add_row(key, str(value))

    console.print(table)


def _display_env_vars() -> None:
    """Display available environment variables for configuration."""
    table = Table(title="spritepack Environment Variables")
    table.add_column("Environment Variable", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Example", style="green")

    for var_name, description, example in ENV_VARS:
        table.add_row(var_name, description, example)

    console.print(table)
    console.print("\n[dim]These override the default options of every atlas.[/dim]")


if __name__ == "__main__":
    app()
