"""Command-line entrypoints for computing and checking invoices."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich import print
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import get_settings
from .formatters import format_currency, format_quantity
from .paginator import InvalidPageSizeError
from .pipeline import prepare_from_request
from .schemas import InvoiceComputation, InvoiceRequest
from .validator import InvoiceConsistencyChecker

app = typer.Typer(add_completion=False, help="GST invoice engine CLI")


@app.callback()
def configure(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine decisions")) -> None:
    level = logging.DEBUG if verbose else get_settings().log_level
    logging.basicConfig(level=level, format="%(message)s", handlers=[RichHandler(show_path=False)], force=True)


def _load_request(json_path: Path, page_size: Optional[int] = None) -> InvoiceRequest:
    try:
        request = InvoiceRequest.model_validate(json.loads(json_path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValidationError) as exc:
        print(f"[red]Invalid request in {escape(str(json_path))}:[/red]\n{escape(str(exc))}")
        raise typer.Exit(code=2)
    if page_size is not None:
        request = request.model_copy(update={"page_size": page_size})
    return request


def _compute(request: InvoiceRequest) -> InvoiceComputation:
    try:
        return prepare_from_request(request)
    except InvalidPageSizeError as exc:
        raise typer.BadParameter(str(exc), param_hint="--page-size")


def _print_summary(computation: InvoiceComputation) -> None:
    totals = computation.totals
    header = computation.header
    print(f"[bold]{header.title}[/bold] {header.invoice_number}  ({header.date})")

    table = Table("Sr.", "Item", "HSN/SAC", "Qty", "Taxable", "Rate", "Total")
    for index, line in enumerate(computation.taxed_lines, start=1):
        table.add_row(
            str(index),
            line.name,
            line.code or "-",
            format_quantity(line.quantity, line.unit),
            format_currency(line.taxable_value),
            f"{line.gst_rate:g}%",
            format_currency(line.total),
        )
    print(table)

    print(f"[bold]Taxable:[/bold] {format_currency(totals.total_taxable)}")
    if totals.show_cgst_sgst:
        print(f"CGST: {format_currency(totals.total_cgst)}  SGST: {format_currency(totals.total_sgst)}")
    elif totals.show_igst:
        print(f"IGST: {format_currency(totals.total_igst)}")
    else:
        print("[dim]No GST applied[/dim]")
    print(f"[green]Total:[/green] {format_currency(totals.total_amount)}")
    print(computation.amount_in_words)

    if computation.hsn_rows:
        print("HSN/SAC summary:")
        for row in computation.hsn_rows:
            print(f"- {row.hsn_code}: {format_currency(row.taxable_value)} @ {row.tax_rate:g}% -> {format_currency(row.total)}")
    sizes = ", ".join(str(len(page.items)) for page in computation.pages)
    print(f"Pages: {len(computation.pages)} ({sizes})")


@app.command()
def compute(
    input: Path = typer.Option(..., exists=True, dir_okay=False, help="JSON file with an invoice request"),
    page_size: Optional[int] = typer.Option(None, help="Rows per printed page"),
    report: Optional[Path] = typer.Option(None, help="Optional path to write the computed invoice as JSON"),
) -> None:
    """Normalize, tax, summarize and paginate one invoice."""
    computation = _compute(_load_request(input, page_size))
    if report:
        report.parent.mkdir(parents=True, exist_ok=True)
        report.write_text(computation.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
        print(f"Invoice written to {report}")
    _print_summary(computation)


@app.command()
def check(
    input: Path = typer.Option(..., exists=True, dir_okay=False, help="JSON file with an invoice request"),
    page_size: Optional[int] = typer.Option(None, help="Rows per printed page"),
) -> None:
    """Verify that totals, HSN rows and pages of an invoice agree."""
    computation = _compute(_load_request(input, page_size))
    report = InvoiceConsistencyChecker(tolerance=get_settings().tolerance).check(computation)
    for warning in report.warnings:
        print(f"[yellow]warning[/yellow] {warning}")
    for error in report.errors:
        print(f"[red]error[/red] {error}")
    if not report.is_consistent:
        raise typer.Exit(code=1)
    print("[green]Consistent[/green]")


def main():
    app()


if __name__ == "__main__":
    main()
