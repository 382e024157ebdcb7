"""CLI entrypoint for iconrequest tools."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from tqdm import tqdm

from iconrequest.config import UploadMode, load_service_config, load_upload_config
from iconrequest.log import configure_logging

app = typer.Typer(
    name="iconrequest",
    help="Submit icon requests to the statistics service",
    no_args_is_help=True,
)
console = Console()

# Default config paths (relative to the working directory)
DEFAULT_UPLOAD_CONFIG = Path("configs") / "upload.yaml"
DEFAULT_RESOURCES = Path("configs") / "resources.yaml"


@app.command()
def submit(
    batch: Annotated[Path, typer.Argument(help="Path to JSON file with icon requests")],
    config: Annotated[
        Path, typer.Option("--config", "-c", help="Upload config path")
    ] = DEFAULT_UPLOAD_CONFIG,
    resources: Annotated[
        Path, typer.Option(help="Resource file with endpoint and token")
    ] = DEFAULT_RESOURCES,
    env_file: Annotated[Path | None, typer.Option(help=".env file with fallback settings")] = None,
    mode: Annotated[UploadMode | None, typer.Option(help="Override the upload mode")] = None,
    premium: Annotated[bool, typer.Option("--premium", help="Mark the request as premium")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
):
    """Upload a batch of icon requests."""
    from iconrequest.archive import ConsoleSharePresenter
    from iconrequest.models.request import load_items
    from iconrequest.submit import IconRequestSubmitter

    configure_logging(logging.DEBUG if verbose else logging.INFO)

    upload_cfg = load_upload_config(config)
    if mode is not None:
        upload_cfg = upload_cfg.model_copy(update={"mode": mode})

    items = load_items(batch)
    console.print(f"[bold]Loaded {len(items)} requests from {batch}[/bold]")
    console.print(f"  Mode: {upload_cfg.mode.value}")
    console.print(f"  Batch size: {upload_cfg.batch_size}, concurrency: {upload_cfg.max_concurrency}\n")

    submitter = IconRequestSubmitter(
        config_provider=lambda: load_service_config(resources, env_file),
        upload_config=upload_cfg,
        presenter=ConsoleSharePresenter(console),
    )
    with submitter, tqdm(total=len(items), desc="Uploading icons") as progress:
        result = submitter.submit(
            items,
            is_premium=premium,
            on_complete=lambda item, outcome: progress.update(1),
        )

    if result:
        console.print(f"\n[red]{escape(result)}[/red]")
        raise typer.Exit(code=1)

    console.print("\n[green]Icon request submitted.[/green]")


@app.command()
def version():
    """Show version information."""
    from iconrequest import __version__

    console.print(f"iconrequest version {__version__}")


if __name__ == "__main__":
    app()
