"""Command-line interface for MText Bridge."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn

from mtext_bridge import __version__
from mtext_bridge.config import Settings, get_settings
from mtext_bridge.core.converter import ConversionError, MTextConverter
from mtext_bridge.formats import INPUT_EXTENSIONS

app = typer.Typer(
    name="mtext-bridge",
    help="Convert rich-text editor HTML to MText control-code strings.",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"MText Bridge v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, settings: Settings) -> None:
    """Route library logging through rich."""
    level = logging.DEBUG if verbose else settings.log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def generate_output_path(
    input_path: Path,
    output_dir: Optional[Path] = None,
    dump_model: bool = False,
) -> Path:
    """Generate output path: .mtext, or -model.json for model dumps."""
    if dump_model:
        output_name = f"{input_path.stem}-model.json"
    else:
        output_name = f"{input_path.stem}.mtext"

    if output_dir:
        return output_dir / output_name
    return input_path.parent / output_name


def process_file(
    converter: MTextConverter,
    input_path: Path,
    output_path: Optional[Path],
    verbose: bool,
    to_stdout: bool = False,
    dump_model: bool = False,
) -> bool:
    """Process a single file. Returns True on success."""
    if not input_path.exists():
        err_console.print(f"[red]Error:[/red] File not found: {input_path}")
        return False

    ext = input_path.suffix.lower()
    if ext not in INPUT_EXTENSIONS:
        err_console.print(
            f"[yellow]Skipping:[/yellow] {input_path.name} "
            f"(unsupported format: {ext})"
        )
        return False

    if output_path is None and not to_stdout:
        output_path = generate_output_path(input_path, dump_model=dump_model)

    if verbose:
        err_console.print(f"[blue]Processing:[/blue] {input_path}")
        err_console.print(f"[blue]Output:[/blue] {output_path or 'stdout'}")

    try:
        if to_stdout:
            nodes = converter.read_file(input_path)
            # Plain echo: MText must not go through rich markup
            typer.echo(converter.convert_nodes(nodes))
        else:
            converter.convert_file(input_path, output_path)
            err_console.print(f"[green]Success:[/green] {output_path}")
        return True
    except ConversionError as e:
        err_console.print(f"[red]Error processing {input_path.name}:[/red] {e}")
        if verbose:
            err_console.print_exception()
        return False


def process_folder(
    converter: MTextConverter,
    folder_path: Path,
    verbose: bool,
    dump_model: bool = False,
    recursive: bool = True,
) -> tuple[int, int]:
    """Process all input files in a folder. Returns (success_count, fail_count)."""
    if not folder_path.is_dir():
        err_console.print(f"[red]Error:[/red] Not a directory: {folder_path}")
        return 0, 0

    files: list[Path] = []
    for ext in INPUT_EXTENSIONS:
        if recursive:
            files.extend(folder_path.rglob(f"*{ext}"))
        else:
            files.extend(folder_path.glob(f"*{ext}"))

    # Model dumps written by an earlier --json run are outputs, not inputs
    files = sorted(f for f in files if not f.stem.endswith("-model"))

    if not files:
        err_console.print(
            f"[yellow]No supported files found in {folder_path}[/yellow]\n"
            f"Supported formats: {', '.join(INPUT_EXTENSIONS)}"
        )
        return 0, 0

    err_console.print(f"[blue]Found {len(files)} file(s) to process[/blue]")

    success_count = 0
    fail_count = 0

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
    ) as progress:
        task = progress.add_task("Converting files...", total=len(files))

        for file_path in files:
            progress.update(task, description=f"Converting {file_path.name}...")
            if process_file(
                converter, file_path, None, verbose, dump_model=dump_model
            ):
                success_count += 1
            else:
                fail_count += 1
            progress.advance(task)

    return success_count, fail_count


@app.command()
def main(
    path: Path = typer.Argument(
        ...,
        help="HTML/JSON file or folder to convert",
        exists=True,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path (for single file only); .json writes the model",
    ),
    to_stdout: bool = typer.Option(
        False,
        "--stdout",
        "-s",
        help="Print the MText string instead of writing a file",
    ),
    dump_model: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Write the parsed document model as JSON instead of MText",
    ),
    font: Optional[str] = typer.Option(
        None,
        "--font",
        "-f",
        help="Font family used when bold/italic text names no font (default: Arial)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Convert editor HTML to MText.

    Examples:

        mtext-bridge note.html  # Writes note.mtext

        mtext-bridge note.html --stdout

        mtext-bridge note.html --json  # Writes note-model.json (document model)

        mtext-bridge note.json -o note.mtext  # Serialize a hand-built model

        mtext-bridge /path/to/folder
    """
    settings = get_settings()
    if font:
        settings = settings.model_copy(update={"default_font": font})
    configure_logging(verbose, settings)
    converter = MTextConverter(settings)

    if path.is_file():
        if dump_model and to_stdout:
            err_console.print(
                "[yellow]Warning:[/yellow] --json is ignored with --stdout"
            )
        success = process_file(
            converter, path, output, verbose, to_stdout=to_stdout, dump_model=dump_model
        )
        raise typer.Exit(0 if success else 1)

    if output is not None:
        err_console.print(
            "[yellow]Warning:[/yellow] --output is ignored in folder mode. "
            "Files will be saved alongside the originals."
        )
    if to_stdout:
        err_console.print(
            "[yellow]Warning:[/yellow] --stdout is ignored in folder mode."
        )

    success, fail = process_folder(converter, path, verbose, dump_model=dump_model)
    err_console.print(
        f"\n[bold]Complete:[/bold] {success} succeeded, {fail} failed"
    )
    raise typer.Exit(0 if fail == 0 else 1)


if __name__ == "__main__":
    app()
