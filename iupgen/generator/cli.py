"""Command-line interface for iupgen code generation."""

from __future__ import annotations

import json
import logging
import sys
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from iupgen.generator import zig
from iupgen.generator.catalog import CatalogError, load_file, resolve_parent_attributes
from iupgen.generator.dispatch import DispatchError, ElementSummary, summarize
from iupgen.generator.writer import element_path, format_file, write_element

if TYPE_CHECKING:
    from iupgen.generator.types import Attribute, Catalog, ClassDescriptor

_Job = tuple["ClassDescriptor", list["Attribute"]]


@dataclass(frozen=True)
class GenerateConfig:
    """Options of one gen run."""

    input_file: Path
    output_dir: Path
    only: frozenset[str]
    jobs: int
    fmt: bool
    zig: str


def _setup_logging(verbose: bool) -> None:
    log = logging.getLogger("iupgen")
    log.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in log.handlers):
        log.addHandler(RichHandler(console=Console(stderr=True), show_path=False, show_time=False))


def _load(input_file: Path) -> Catalog:
    try:
        return load_file(input_file)
    except CatalogError as e:
        Console().print(f"[red]Invalid catalog:[/red] {escape(str(e))}", soft_wrap=True)
        sys.exit(1)


def _render(job: _Job) -> str:
    descriptor, parent_attributes = job
    return zig.render(descriptor, parent_attributes)


def _render_all(jobs: list[_Job], workers: int) -> list[str | DispatchError]:
    """Render elements, keeping results in job order.

    A DispatchError only aborts its own element and is returned in its place.
    """
    results: list[str | DispatchError] = []
    if workers <= 1:
        for job in jobs:
            try:
                results.append(_render(job))
            except DispatchError as e:
                results.append(e)
        return results

    with ProcessPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_render, job) for job in jobs]
        for future in futures:
            try:
                results.append(future.result())
            except DispatchError as e:
                results.append(e)
    return results


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """IUP element binding generator."""
    _setup_logging(verbose)


@cli.command()
@click.option(
    "--input",
    "-i",
    "input_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Element catalog (JSON)",
)
@click.option(
    "--output",
    "-o",
    "output_dir",
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory",
)
@click.option("--only", multiple=True, help="Generate only the named element (repeatable)")
@click.option("--jobs", "-j", default=1, show_default=True, help="Elements rendered in parallel")
@click.option("--fmt/--no-fmt", default=True, show_default=True, help="Run zig fmt on output")
@click.option(
    "--zig", "zig_path", default="zig", envvar="IUPGEN_ZIG", help="Zig executable used to format"
)
def gen(
    input_file: Path,
    output_dir: Path,
    only: tuple[str, ...],
    jobs: int,
    fmt: bool,
    zig_path: str,
) -> None:
    """Generate Zig element bindings from a catalog."""
    config = GenerateConfig(
        input_file=input_file,
        output_dir=output_dir,
        only=frozenset(only),
        jobs=jobs,
        fmt=fmt,
        zig=zig_path,
    )
    console = Console()
    catalog = _load(config.input_file)

    known = {descriptor.name for descriptor in catalog.classes}
    unknown = sorted(config.only - known)
    if unknown:
        console.print(f"Unknown element: {escape(', '.join(unknown))}")
        sys.exit(1)

    jobs_list: list[_Job] = [
        (descriptor, resolve_parent_attributes(catalog, descriptor))
        for descriptor in catalog.classes
        if not config.only or descriptor.name in config.only
    ]

    failures = 0
    for (descriptor, _), result in zip(jobs_list, _render_all(jobs_list, config.jobs), strict=True):
        if isinstance(result, DispatchError):
            failures += 1
            console.print(
                f"[red]{escape(descriptor.name)}:[/red] {escape(str(result))}", soft_wrap=True
            )
            continue

        path = element_path(config.output_dir, descriptor)
        write_element(path, result)
        if config.fmt:
            format_file(path, config.zig)

    generated = len(jobs_list) - failures
    console.print(
        f"Generated {generated} element{'s' if generated != 1 else ''} in {config.output_dir}",
        soft_wrap=True,
    )
    if failures:
        sys.exit(1)


@cli.command()
@click.option(
    "--input",
    "-i",
    "input_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Element catalog (JSON)",
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(input_file: Path, output_json: bool) -> None:
    """Display accessor coverage for each element."""
    catalog = _load(input_file)

    summaries: list[ElementSummary | DispatchError] = []
    for descriptor in catalog.classes:
        try:
            summaries.append(summarize(descriptor, resolve_parent_attributes(catalog, descriptor)))
        except DispatchError as e:
            summaries.append(e)

    if output_json:
        _output_json(catalog, summaries)
    else:
        _output_plain(catalog, summaries)


def _output_json(catalog: Catalog, summaries: list[ElementSummary | DispatchError]) -> None:
    """Output coverage as JSON."""
    data: dict = {"elements": {}}

    for descriptor, summary in zip(catalog.classes, summaries, strict=True):
        entry: dict = {
            "class_name": descriptor.class_name,
            "native_type": descriptor.native_type.value,
        }
        if isinstance(summary, DispatchError):
            entry["error"] = str(summary)
        else:
            entry.update(
                {
                    "attributes": summary.attributes,
                    "setters": summary.setters,
                    "getters": summary.getters,
                    "callbacks": summary.callbacks,
                    "tests": summary.tests,
                    "unsupported": summary.unsupported,
                }
            )
        data["elements"][descriptor.name] = entry

    print(json.dumps(data, indent=2))


def _output_plain(catalog: Catalog, summaries: list[ElementSummary | DispatchError]) -> None:
    """Output coverage using rich text formatting."""
    console = Console()

    console.print("[bold cyan]Elements[/bold cyan]")
    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("Name", style="white")
    table.add_column("Class", style="dim")
    table.add_column("Kind", style="dim")
    table.add_column("Setters", style="yellow", justify="right")
    table.add_column("Getters", style="yellow", justify="right")
    table.add_column("Callbacks", style="yellow", justify="right")
    table.add_column("Tests", style="green", justify="right")
    table.add_column("Unsupported", style="red")

    errors: list[tuple[str, DispatchError]] = []
    for descriptor, summary in zip(catalog.classes, summaries, strict=True):
        kind = descriptor.native_type.value
        if isinstance(summary, DispatchError):
            errors.append((descriptor.name, summary))
            table.add_row(descriptor.name, descriptor.class_name, kind, "-", "-", "-", "-", "error")
            continue

        table.add_row(
            descriptor.name,
            descriptor.class_name,
            kind,
            str(summary.setters),
            str(summary.getters),
            str(summary.callbacks),
            str(summary.tests),
            escape(", ".join(summary.unsupported)),
        )

    console.print(table)

    if errors:
        console.print()
        console.print("[bold red]Errors[/bold red]")
        for name, error in errors:
            console.print(f"  {escape(name)}: {escape(str(error))}")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
