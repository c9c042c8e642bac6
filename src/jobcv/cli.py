"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from jobcv.clients.job_client import JobSearchClient
from jobcv.clients.llm_client import LLMClient
from jobcv.config import load_config
from jobcv.errors import JobCVError
from jobcv.models.profile import Profile
from jobcv.pipeline.orchestrator import CVPipeline, JobStage, StageEvent
from jobcv.pipeline.template_resolver import TemplateResolver
from jobcv.storage.kv_store import JsonFileStore
from jobcv.templates.loader import list_templates

TECH_CHOICES = ("Node.js", "React", "Python", "C++")

app = typer.Typer(
    name="jobcv",
    help="Search job offers and tailor a CV to each one with a local LLM.",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int = typer.Option(None, "--port", "-p", help="Port (default from config / PORT)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Run the HTTP API and serve generated CVs under /cvs."""
    import uvicorn

    from jobcv.api.server import create_app

    _setup_logging(verbose)
    try:
        config = load_config()
    except JobCVError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    host = host or config.server.host
    port = port or config.server.port
    console.print(f"[green]Server running at http://{host}:{port}[/green]")
    uvicorn.run(create_app(config), host=host, port=port, log_config=None)


@app.command()
def search(
    query: str = typer.Argument(help="Job title to search for"),
    location: str = typer.Option("", "--location", "-l", help="City or region"),
    tech: str = typer.Option(None, "--tech", help=f"Target technology, e.g. {', '.join(TECH_CHOICES)}"),
    profile_path: Path = typer.Option(None, "--profile", help="Profile JSON file"),
    template_path: Path = typer.Option(None, "--template", "-t", help="Custom CV template text file"),
    template_name: str = typer.Option(None, "--template-name", help="Save/load the custom template under this name"),
    output_dir: Path = typer.Option(None, "--output-dir", "-o", help="Where to write CVs"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Fetch matching offers and generate one tailored CV per offer."""
    _setup_logging(verbose)
    for path in (profile_path, template_path):
        if path is not None and not path.exists():
            console.print(f"[red]File not found: {path}[/red]")
            raise typer.Exit(1)

    full_query = f"{query} {tech}" if tech else query
    profile = None
    if profile_path is not None:
        try:
            profile = Profile.model_validate(json.loads(profile_path.read_text(encoding="utf-8")))
        except ValueError as e:
            console.print(f"[red]Invalid profile file: {e}[/red]")
            raise typer.Exit(1)
    custom_template = template_path.read_text(encoding="utf-8") if template_path else None

    try:
        config = load_config()
        job_client = JobSearchClient.from_config(config.jooble)
    except JobCVError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    store = JsonFileStore(config.output.resolved_templates_path)
    cv_dir = output_dir or config.output.resolved_cv_dir

    console.print(f"[cyan]Starting job search for '{full_query}'...[/cyan]")
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Fetching jobs...", total=None)

        def on_stage(event: StageEvent) -> None:
            progress.update(task, total=event.total)
            if event.stage is JobStage.PENDING:
                progress.update(task, description=f"Generating CV: {event.job.describe()}")
            elif event.stage in (JobStage.RENDERED, JobStage.FAILED):
                progress.advance(task)

        async def _run():
            async with LLMClient.from_config(config.ollama) as llm:
                pipeline = CVPipeline(
                    llm,
                    TemplateResolver(store),
                    cv_dir,
                    job_client=job_client,
                    on_stage=on_stage,
                )
                batch = await pipeline.search_and_generate(
                    full_query,
                    location or None,
                    custom_template=custom_template,
                    template_name=template_name,
                    profile=profile,
                )
                return batch, llm.get_token_summary()

        try:
            batch, usage = asyncio.run(_run())
        except JobCVError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

    if not batch.total:
        console.print("[yellow]No jobs found[/yellow]")
        return

    searches = job_client.get_search_count()
    table = Table(title=f"Generated {batch.count} of {batch.total} CVs")
    table.add_column("Position")
    table.add_column("Company")
    table.add_column("Location")
    table.add_column("File")
    for r in batch.results:
        table.add_row(r.title or "", r.company or "", r.location or "", r.cv_filename)
    console.print(table)

    for failure in batch.failures:
        console.print(f"[yellow]Skipped {failure.job.describe()}: {failure.error}[/yellow]")
    console.print(f"[green]CVs saved to {cv_dir}[/green]")
    console.print(
        f"[dim]Jooble searches: {searches} | "
        f"Tokens used: {usage['input']:,} input, {usage['output']:,} output "
        f"over {len(usage['calls'])} calls[/dim]"
    )


@app.command()
def templates() -> None:
    """List built-in and saved custom templates."""
    for language in list_templates():
        console.print(f"  [bold]{language}[/bold] [dim](built-in)[/dim]")

    config = load_config()
    custom = JsonFileStore(config.output.resolved_templates_path).all()
    if not custom:
        console.print("[yellow]No custom templates saved.[/yellow]")
        return
    for name in sorted(custom):
        first_line = custom[name].strip().splitlines()[0] if custom[name].strip() else ""
        console.print(f"  [bold]{name}[/bold]: {first_line[:60]}")


if __name__ == "__main__":
    app()
