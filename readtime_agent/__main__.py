"""Simple CLI entrypoint for readtime-agent.

Estimates reading time for the given resources, e.g.::

    readtime-agent --substack https://foo.substack.com/p/some-post --arxiv-pdf https://arxiv.org/pdf/2101.00001 --wpm 250
"""
import argparse
import asyncio
import logging
import sys

import pydantic
from rich.console import Console
from rich.logging import RichHandler

from .config import ReaderConfig
from .models import PipelineResult
from .pipeline import collect_inputs, run_pipeline

console = Console()


def _format_duration(result_minutes: float) -> str:
    minutes, seconds = divmod(round(result_minutes * 60), 60)
    return f"{minutes}m{seconds:02d}s"


def report(result: PipelineResult, wpm: int) -> None:
    console.print()
    for resource in result.resources:
        if resource.read_time is None:
            if resource.is_extracted:
                console.print(f"[cyan]Extracted (not scored):[/cyan] {resource.raw_url}")
            continue
        scaled = resource.read_time.total_seconds() / 60
        console.print(
            f"[blue]It will take approximately {_format_duration(scaled)} to read[/blue] {resource.raw_url}"
            f" [dim](complexity {resource.complexity}, base {resource.base_minutes:.2f} min)[/dim]"
        )

    console.print(f"[magenta]With a WPM reading speed of {wpm} words per minute (scaled for textual complexity).[/magenta]")
    console.print()

    if not result.errors:
        console.print("[green]No errors detected when parsing resources![/green]")
    for error in result.errors:
        console.print(f"[red]Obtained the following error when parsing resources:[/red] {error}")


async def run(args: argparse.Namespace) -> int:
    inputs = collect_inputs(args.blog, args.substack, args.arxiv_pdf, args.arxiv_html)
    if not inputs:
        console.print("[red]No resources provided. Use --blog, --substack, --arxiv-pdf or --arxiv-html.[/red]")
        return 2

    overrides = {"process_invalid": args.process_invalid}
    if args.wpm is not None:
        overrides["wpm"] = args.wpm
    if args.staging_dir is not None:
        overrides["staging_dir"] = args.staging_dir
    if args.timeout is not None:
        overrides["task_timeout"] = args.timeout if args.timeout > 0 else None
    if args.no_keep_staged:
        overrides["keep_staged"] = False
    if args.spacy_model is not None:
        overrides["spacy_model"] = args.spacy_model
    try:
        config = ReaderConfig.from_env(**overrides)
    except pydantic.ValidationError as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        return 2

    if args.dry_run:
        console.print(f"[yellow]Dry run:[/yellow] would analyse {len(inputs)} resources at {config.wpm} wpm")
        for kind, url in inputs:
            console.print(f"- {kind.value}: {url}")
        return 0

    result = await run_pipeline(inputs, config=config)
    report(result, config.wpm)
    return 1 if result.errors else 0


def main() -> None:
    parser = argparse.ArgumentParser(prog="readtime-agent")
    parser.add_argument("--blog", action="append", default=[], help="Blog resource URL (repeatable)")
    parser.add_argument("--substack", action="append", default=[], help="Substack post URL (repeatable)")
    parser.add_argument("--arxiv-pdf", action="append", default=[], help="arXiv PDF URL (repeatable)")
    parser.add_argument("--arxiv-html", action="append", default=[], help="Experimental arXiv HTML URL (repeatable)")
    parser.add_argument("--wpm", type=int, default=None, help="Words per minute reading speed (default 200)")
    parser.add_argument("--staging-dir", default=None, help="Directory for downloaded PDFs (default ./arxiv)")
    parser.add_argument("--timeout", type=float, default=None, help="Per-resource deadline in seconds; 0 disables it")
    parser.add_argument("--no-keep-staged", action="store_true", help="Delete downloaded PDFs after parsing")
    parser.add_argument("--process-invalid", action="store_true", help="Still fetch resources that failed validation")
    parser.add_argument("--spacy-model", default=None, help="spaCy model used for tagging")
    parser.add_argument("--dry-run", action="store_true", help="Show actions without fetching anything")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.wpm is not None and args.wpm <= 0:
        console.print("[red]--wpm must be a positive integer.[/red]")
        sys.exit(2)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    exit_code = asyncio.run(run(args))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
