"""
xlsx-templates CLI

Command-line interface for generating bulk upload workbooks.

Usage:
    xlsx-templates list
    xlsx-templates show MORTGAGE
    xlsx-templates generate MORTGAGE --output mortgage.xlsx
    xlsx-templates generate MORTGAGE --templates templates.yaml --rows 500 --info-row
    xlsx-templates serve --port 8000
"""

from pathlib import Path
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import AppConfig, load_config
from .exceptions import TemplateError
from .generator import ExcelGenerator
from .logging_setup import configure_logging
from .registry import TemplateRegistry
from .web import template_filename

app = typer.Typer(
    name="xlsx-templates",
    help="Bulk upload workbook generator",
    add_completion=False
)

console = Console()

TEMPLATES_OPTION = typer.Option(
    None,
    "--templates", "-t",
    help="YAML file with template sheets and instrument templates"
)


def load_registry(templates: Optional[Path], config: Optional[AppConfig] = None) -> TemplateRegistry:
    """Registry from an explicit file, else from configuration."""
    config = config or load_config()
    configure_logging(config.log)
    if templates is not None:
        registry = TemplateRegistry.from_yaml(templates)
    else:
        registry = TemplateRegistry.from_config(config)
    registry.initialize()
    return registry


@app.command("list")
def list_templates(templates: Optional[Path] = TEMPLATES_OPTION):
    """List instrument templates and their sheets."""
    try:
        registry = load_registry(templates)
    except TemplateError as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Instrument templates")
    table.add_column("Instrument type", style="cyan")
    table.add_column("Sheets", style="green")
    for entry in registry.list_templates():
        table.add_row(
            entry["instrument_type"],
            ", ".join(sheet["name"] for sheet in entry["sheets"])
        )
    console.print(table)


@app.command("show")
def show_template(
    instrument_type: str = typer.Argument(..., help="Instrument type, e.g. MORTGAGE"),
    templates: Optional[Path] = TEMPLATES_OPTION,
):
    """Show the resolved columns of every sheet of an instrument template."""
    try:
        registry = load_registry(templates)
        definition = ExcelGenerator(registry).lookup(instrument_type)
    except TemplateError as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        raise typer.Exit(1)

    for sheet in definition.sheets:
        table = Table(title=sheet.name)
        table.add_column("Header", style="cyan")
        table.add_column("Type")
        table.add_column("Required")
        table.add_column("Format")
        table.add_column("Allowed values")
        for column in sheet.columns:
            table.add_row(
                column.header,
                column.type_label,
                "yes" if column.required else "no",
                column.resolved_format(),
                ", ".join(column.resolved_allowed_values()),
            )
        console.print(table)


@app.command("generate")
def generate(
    instrument_type: str = typer.Argument(..., help="Instrument type, e.g. MORTGAGE"),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output file (default: <type>_bulk_upload_<date>.xlsx)"
    ),
    templates: Optional[Path] = TEMPLATES_OPTION,
    rows: Optional[int] = typer.Option(
        None,
        "--rows",
        min=1,
        help="Number of data rows covered by validation"
    ),
    info_row: Optional[bool] = typer.Option(
        None,
        "--info-row/--no-info-row",
        help="Add a row describing each column below the header"
    ),
):
    """
    Generate the bulk upload workbook for an instrument type.
    """
    config = load_config()
    updates = {}
    if rows is not None:
        updates["data_rows"] = rows
    if info_row is not None:
        updates["info_row"] = info_row
    settings = config.rendering.model_copy(update=updates)

    try:
        registry = load_registry(templates, config)
        content = ExcelGenerator(registry, settings).generate_template(instrument_type)
    except TemplateError as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        raise typer.Exit(1)

    output = output or Path(template_filename(instrument_type))
    output.write_bytes(content)
    console.print(f"[green]✓[/green] Template saved: [cyan]{output}[/cyan] ({len(content)} bytes)")


@app.command("serve")
def serve(
    host: str = typer.Option(
        "127.0.0.1",
        "--host", "-h",
        help="Host to listen on"
    ),
    port: int = typer.Option(
        8000,
        "--port", "-p",
        help="Port to listen on"
    ),
    reload: bool = typer.Option(
        False,
        "--reload", "-r",
        help="Reload on code changes"
    )
):
    """
    Run the template download API.
    """
    console.print(Panel.fit(
        f"[bold]xlsx-templates - Web Server[/bold]\n"
        f"Listening on http://{host}:{port}",
        border_style="blue"
    ))
    uvicorn.run(
        "xlsx_templates.web:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
