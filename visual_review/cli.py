"""CLI entry point for the visual review tooling."""

from __future__ import annotations

import asyncio
import logging
import os
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from visual_review.backstop.config_writer import BackstopConfigNotFoundError
from visual_review.backstop.local_runner import LocalRunner
from visual_review.browser.capture import capture_screenshot
from visual_review.models.config import (
    BACKSTOP_COMMANDS,
    DEFAULT_BACKSTOP_PATH,
    DEFAULT_COOKIES_PATH,
    PipelineSettings,
    RunnerConfig,
    ViewportConfig,
)
from visual_review.pipeline import run_url_pair_pipeline

console = Console()


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Visual regression helpers for pull-request workflows"""
    setup_logging(verbose)


@cli.command("parse-pr")
@click.argument("pr_body", required=False)
@click.argument("backstop_path", required=False)
def parse_pr(pr_body: str | None, backstop_path: str | None) -> None:
    """Add Before/After URL pairs from a PR body as backstop scenarios.

    PR_BODY and BACKSTOP_PATH environment variables take precedence over
    the positional arguments.
    """
    settings = PipelineSettings(
        pr_body=os.environ.get("PR_BODY") or pr_body,
        backstop_path=(
            os.environ.get("BACKSTOP_PATH") or backstop_path or DEFAULT_BACKSTOP_PATH
        ),
    )
    if not settings.pr_body:
        console.print("[yellow]No PR body provided.[/yellow]")
        console.print('Usage: visual-review parse-pr "<pr-body>" [backstop-path]')
        console.print("Or set the PR_BODY environment variable")
        return

    try:
        result = run_url_pair_pipeline(settings)
    except BackstopConfigNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    if result.status != "updated":
        console.print("[yellow]No valid URL pairs found in PR body[/yellow]")
        return

    table = Table(title="Added Scenarios")
    table.add_column("#", style="bold")
    table.add_column("Reference (before)")
    table.add_column("Test (after)")
    for i, pair in enumerate(result.validated, 1):
        table.add_row(str(i), pair.before, pair.after)
    console.print(table)
    console.print(
        f"[green]Successfully updated {settings.backstop_path}[/green] "
        f"({result.added} of {len(result.candidates)} pairs added)"
    )


@cli.command()
@click.argument(
    "command", required=False, default="test", type=click.Choice(BACKSTOP_COMMANDS)
)
@click.option("--url", "url_pattern", help="Replace 'stage--' with this pattern in URLs")
@click.option("--ref", "ref_pattern", help="Replace 'main--' with this pattern in referenceUrls")
@click.option("--config", "-c", default=str(DEFAULT_BACKSTOP_PATH), help="Backstop config path")
@click.option("--cookies", default=str(DEFAULT_COOKIES_PATH), help="Cookies storage-state path")
def run(command: str, url_pattern: str | None, ref_pattern: str | None,
        config: str, cookies: str) -> None:
    """Run backstop locally against other environments.

    \b
    Examples:
      visual-review run test --url "my-branch--" --ref "main--"
      visual-review run reference --url "my-branch--" --ref "production--"
      visual-review run test
    """
    runner_config = RunnerConfig(
        command=command,
        url_pattern=url_pattern,
        ref_pattern=ref_pattern,
        config_path=config,
        cookies_path=cookies,
    )
    exit_code = LocalRunner(runner_config).run()
    console.print("[bold]Done![/bold]")
    sys.exit(exit_code)


@cli.command()
@click.argument("url")
@click.option("--output", "-o", default="screenshot.png", help="Screenshot file path")
@click.option("--width", default=1280, help="Viewport width")
@click.option("--height", default=720, help="Viewport height")
@click.option("--cookies", default=str(DEFAULT_COOKIES_PATH), help="Cookies storage-state path")
def capture(url: str, output: str, width: int, height: int, cookies: str) -> None:
    """Take a prepared full-page screenshot of URL."""
    viewport = ViewportConfig(width=width, height=height, name=f"{width}x{height}")
    path = asyncio.run(capture_screenshot(url, output, viewport, storage_state=cookies))
    console.print(f"[green]Screenshot saved:[/green] [blue]{path}[/blue]")


if __name__ == "__main__":
    cli()
