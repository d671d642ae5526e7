"""CLI entry point for oshirase."""

import json
import logging
from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from .config import load_config
from .extract.dates import DEFAULT_YEAR

console = Console()


@click.group()
@click.option("--config", "-c", "config_path", default=None, help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, config_path, verbose):
    """oshirase - Turn OCR'd school notices into calendar activities."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _get_config(ctx) -> dict:
    return load_config(ctx.obj.get("config_path"))


def _print_content(result):
    content = result.parsed_content
    console.print(f"\n[bold]{content.title or '(no title)'}[/]")
    console.print(f"  Confidence: {result.confidence:.2f}  Status: {result.processing_status}")

    if content.dates or content.times:
        table = Table(title="Dates & Times")
        table.add_column("Kind", style="dim")
        table.add_column("Text", style="cyan")
        table.add_column("Value", style="green")
        table.add_column("Type")
        table.add_column("Conf.", justify="right")
        for d in content.dates:
            table.add_row("date", d.text, d.date, d.type, f"{d.confidence:.2f}")
        for t in content.times:
            table.add_row("time", t.text, t.time, t.type, f"{t.confidence:.2f}")
        console.print(table)

    if content.items:
        table = Table(title="Items")
        table.add_column("Category", style="dim")
        table.add_column("Items", style="cyan")
        table.add_column("Conf.", justify="right")
        for i in content.items:
            table.add_row(i.category, "、".join(i.items), f"{i.confidence:.2f}")
        console.print(table)

    if content.locations:
        console.print(f"  Locations: {'、'.join(content.locations)}")
    for note in content.notes:
        console.print(f"  ※ {note}")

    if result.extracted_activities:
        table = Table(title="Activities")
        table.add_column("Title", style="cyan")
        table.add_column("Category")
        table.add_column("Priority")
        table.add_column("When", style="green")
        table.add_column("Checklist", justify="right")
        for a in result.extracted_activities:
            when = a.due_date or a.start_date or ""
            if a.start_time:
                when += f" {a.start_time}" + (f"-{a.end_time}" if a.end_time else "")
            table.add_row(a.title, a.category, a.priority, when.strip(), str(len(a.checklist)))
        console.print(table)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--confidence", type=float, default=None, help="OCR confidence (overrides file header)")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def parse(ctx, file, confidence, as_json):
    """Parse one OCR text file and show what was extracted."""
    from .config import get_thresholds, load_keywords
    from .processor import process_command, read_ocr_file
    from .serialize import to_plain

    config = _get_config(ctx)
    parsing = config.get("parsing", {})
    command = read_ocr_file(Path(file), float(parsing.get("default_confidence", 0.9)))
    if confidence is not None:
        command = replace(command, confidence=confidence)

    outcome = process_command(
        command,
        keywords=load_keywords(config.get("keywords_path")),
        thresholds=get_thresholds(config),
        default_year=int(parsing.get("default_year", DEFAULT_YEAR)),
    )
    if outcome.is_err():
        console.print(f"[red]✗ {outcome.error.kind}: {outcome.error.message}[/]")
        ctx.exit(1)

    if as_json:
        click.echo(json.dumps(to_plain(outcome.value), ensure_ascii=False, indent=2))
    else:
        _print_content(outcome.value)


@cli.command()
@click.argument("path", required=False)
@click.pass_context
def process(ctx, path):
    """Process OCR text files from the inbox or a specific path and store the results."""
    from .config import get_thresholds
    from .processor import process_directory, process_file, store_result
    from .storage import get_repository

    config = _get_config(ctx)
    repository = get_repository(config)
    thresholds = get_thresholds(config)

    if path:
        target = Path(path)
        if target.is_file():
            outcome = process_file(target, config)
            outcomes = [(target, outcome)] if outcome is not None else []
        elif target.is_dir():
            outcomes = process_directory(target, config)
        else:
            console.print(f"[red]Path not found: {path}[/]")
            return
    else:
        inbox = Path(config["inbox_path"])
        if not inbox.exists():
            console.print(f"[yellow]Inbox directory not found: {inbox}[/]")
            return
        outcomes = process_directory(inbox, config)

    if not outcomes:
        console.print("[yellow]No files to process.[/]")
        return

    console.print(f"[blue]Processing {len(outcomes)} document(s)...[/]")
    stored = 0
    for file_path, outcome in outcomes:
        if outcome.is_err():
            console.print(f"  [red]✗ {file_path.name}: {outcome.error.message}[/]")
            continue
        result = outcome.value
        saved = store_result(repository, result, thresholds)
        if saved.is_err():
            console.print(f"  [red]✗ {file_path.name}: {saved.error.message}[/]")
            continue
        stored += 1
        count = len(saved.value)
        console.print(
            f"  [green]✓ {file_path.name}[/] → {result.id} "
            f"({result.processing_status}, {result.confidence:.2f}, {count} approved)"
        )

    console.print(f"[green]✓ Stored {stored} result(s)[/]")
    failed = len(outcomes) - stored
    if failed:
        console.print(f"  [dim]({failed} failed)[/]")


@cli.command()
@click.option("--accept", "accept_id", default=None, help="Accept a result's parsed content as-is")
@click.pass_context
def review(ctx, accept_id):
    """List results that need review, or accept one."""
    from .config import get_thresholds
    from .processor import apply_review, store_result
    from .models import ReviewOcrCommand
    from .storage import get_repository

    config = _get_config(ctx)
    repository = get_repository(config)

    if accept_id:
        found = repository.find_by_id(accept_id)
        if found.is_err():
            console.print(f"[red]{found.error.message}[/]")
            ctx.exit(1)
        command = ReviewOcrCommand(id=accept_id, corrected_content=found.value.parsed_content)
        reviewed = apply_review(found.value, command)
        if reviewed.is_err():
            console.print(f"[red]✗ {reviewed.error.message}[/]")
            ctx.exit(1)
        saved = store_result(repository, reviewed.value, get_thresholds(config), reviewed=True)
        if saved.is_err():
            console.print(f"[red]✗ {saved.error.message}[/]")
            ctx.exit(1)
        console.print(f"[green]✓ Accepted {accept_id} ({len(saved.value)} activity(ies) approved)[/]")
        return

    found = repository.find_needing_review()
    if found.is_err() or not found.value:
        console.print("[green]Nothing to review.[/]")
        return

    table = Table(title="Needs Review")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Confidence", justify="right", style="yellow")
    table.add_column("Activities", justify="right")
    for r in found.value:
        table.add_row(r.id, r.parsed_content.title or "", f"{r.confidence:.2f}", str(len(r.extracted_activities)))
    console.print(table)


@cli.command()
@click.option("--result", "result_id", default=None, help="Only activities approved from this result")
@click.pass_context
def activities(ctx, result_id):
    """List approved activities."""
    from .storage import get_repository

    config = _get_config(ctx)
    found = get_repository(config).find_activities(result_id)
    if found.is_err():
        console.print(f"[red]{found.error.message}[/]")
        return
    if not found.value:
        console.print("[yellow]No approved activities.[/]")
        return

    table = Table(title="Approved Activities")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Category")
    table.add_column("When", style="green")
    table.add_column("Location")
    for a in found.value:
        when = a.due_date or a.start_date or ""
        if a.start_time:
            when += f" {a.start_time}"
        table.add_row(a.id, a.title, a.category, when.strip(), a.location or "")
    console.print(table)


@cli.command()
@click.pass_context
def stats(ctx):
    """Show repository statistics."""
    from .storage import get_repository

    config = _get_config(ctx)
    found = get_repository(config).get_statistics()
    if found.is_err():
        console.print(f"[red]{found.error.message}[/]")
        return
    s = found.value

    console.print("\n[bold]📊 OCR Statistics[/]")
    console.print(f"  Total results: {s.total_results}")
    console.print(f"  Completed: {s.completed_results}")
    console.print(f"  Needs review: {s.review_required_results}")
    console.print(f"  Failed: {s.failed_results}")
    console.print(f"  Pending: {s.pending_results}")
    console.print(f"  Average confidence: {s.average_confidence:.2f}")
    console.print(f"  Success rate: {s.processing_success_rate:.0%}")
    if s.top_categories:
        console.print("\n  [bold]Top categories:[/]")
        for category, count in s.top_categories:
            console.print(f"    {category}: {count}")


@cli.command()
@click.option("--debounce", default=2.0, help="Seconds to wait after last change before processing")
@click.pass_context
def watch(ctx, debounce):
    """Watch the inbox for new OCR text files and process them."""
    from .watcher import InboxWatcher

    config = _get_config(ctx)
    InboxWatcher(config, debounce=debounce).run()


if __name__ == "__main__":
    cli()
