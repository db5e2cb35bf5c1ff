"""
Convivio - CLI Entry Point.

Usage:
    convivio generate DINNER CELLAR     Generate a menu (JSON files in, menu JSON out)
    convivio availability MENU CELLAR   Check the cellar pairings against stock
    convivio invite DINNER              Write an invite message for the guests
    convivio notes DINNER [TYPE]        Write the kitchen, wine or hosting notes
    convivio tasting SHEET              Score an AIS tasting sheet
    convivio serve                      Run the HTTP backend
    convivio health                     Check configuration
    convivio --help                     Show help
"""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table

app = typer.Typer(
    name="convivio",
    help="Convivio - Dinner menus with wine pairings from your own cellar.",
    add_completion=False,
)
console = Console()


def _setup(log_prompts: bool):
    """Configure logging and build the generator from the environment."""
    from convivio.config import get_settings
    from convivio.generator import MenuGenerator
    from convivio.llm.client import get_completion_client
    from convivio.llm.prompt_logger import enable_prompt_logging

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if log_prompts:
        enable_prompt_logging(True)
        console.print("[dim]📝 Prompt logging enabled. Check prompt_logs/ after the run.[/dim]")
    return MenuGenerator(get_completion_client(), settings), settings


def _load_cellar(path: Path | None):
    from convivio.models.cellar import Cellar

    if path is None:
        return Cellar()
    return Cellar.model_validate_json(path.read_text(encoding="utf-8"))


def _print_menu(menu) -> None:
    from convivio.models.menu import WineSource

    for course, dishes in menu.menu.all_courses():
        console.print(f"\n[bold]{course.label}[/bold]")
        for dish in dishes:
            console.print(
                f"  • {dish.name} [dim]({dish.recipe.total_minutes} min, {dish.id[:8]})[/dim]"
            )
    if menu.pairings:
        console.print("\n[bold]Abbinamenti[/bold]")
        for pairing in menu.pairings:
            marker = "🍷" if pairing.source == WineSource.FROM_CELLAR else "🛒"
            line = f"  {marker} {pairing.course}: {pairing.wine.display_name}"
            compatibility = pairing.wine.compatibility
            if compatibility is not None:
                line += f" [{compatibility.score_color}]{compatibility.score}/100[/{compatibility.score_color}]"
            console.print(line)


@app.command()
def generate(
    dinner_file: Path = typer.Argument(..., exists=True, help="Dinner JSON"),
    cellar_file: Path | None = typer.Argument(None, help="Cellar JSON (wines and bottles)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the menu JSON here"),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all LLM prompts to prompt_logs/"),
) -> None:
    """Generate a complete menu for a dinner."""
    from convivio.errors import ConvivioError
    from convivio.models.dinner import DinnerEvent, MenuRequest

    generator, settings = _setup(log_prompts)
    dinner = DinnerEvent.model_validate_json(dinner_file.read_text(encoding="utf-8"))
    cellar = _load_cellar(cellar_file)
    request = MenuRequest.from_dinner(dinner, default_cuisine=settings.default_cuisine)

    try:
        with Live(Spinner("dots", text="Generating menu..."), console=console, transient=True):
            menu = asyncio.run(generator.generate_menu(request, cellar.wines, cellar.bottles))
    except ConvivioError as e:
        console.print(f"\n[red]❌ {type(e).__name__}: {e}[/red]")
        raise typer.Exit(1)

    if output is not None:
        output.write_bytes(menu.to_blob())
        console.print(f"[green]Menu written to {output}[/green]")
    _print_menu(menu)


@app.command()
def availability(
    menu_file: Path = typer.Argument(..., exists=True, help="Menu JSON"),
    cellar_file: Path = typer.Argument(..., exists=True, help="Cellar JSON"),
) -> None:
    """Check whether the cellar holds enough bottles for each pairing."""
    from convivio.errors import DecodeError
    from convivio.matching import check_pairing_availability
    from convivio.models.menu import MenuResponse

    try:
        menu = MenuResponse.from_blob(menu_file.read_bytes())
    except DecodeError as e:
        console.print(f"[red]❌ Invalid menu file: {e}[/red]")
        raise typer.Exit(1)
    cellar = _load_cellar(cellar_file)

    table = Table(title="Disponibilità vini")
    table.add_column("Portata")
    table.add_column("Vino")
    table.add_column("Posizione")
    table.add_column("Stato")
    for pairing in menu.pairings:
        status = check_pairing_availability(pairing, cellar.wines, cellar.bottles)
        location = status.match.location if status.match else None
        style = "yellow" if status.is_warning else None
        table.add_row(
            pairing.course,
            pairing.wine.display_name,
            location or "-",
            status.message or "Da acquistare",
            style=style,
        )
    console.print(table)


@app.command()
def invite(
    dinner_file: Path = typer.Argument(..., exists=True, help="Dinner JSON"),
    menu_file: Path | None = typer.Option(None, "--menu", "-m", help="Menu JSON for context"),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all LLM prompts to prompt_logs/"),
) -> None:
    """Write a short invite message for the guests."""
    from convivio.errors import ConvivioError
    from convivio.models.dinner import DinnerEvent
    from convivio.models.menu import MenuResponse

    generator, _ = _setup(log_prompts)
    dinner = DinnerEvent.model_validate_json(dinner_file.read_text(encoding="utf-8"))
    menu = MenuResponse.from_blob(menu_file.read_bytes()) if menu_file else None

    try:
        message = asyncio.run(generator.generate_invite_message(dinner, menu))
    except ConvivioError as e:
        console.print(f"\n[red]❌ {type(e).__name__}: {e}[/red]")
        raise typer.Exit(1)
    console.print(Panel(message, title="Invito", border_style="green"))


@app.command()
def notes(
    dinner_file: Path = typer.Argument(..., exists=True, help="Dinner JSON"),
    note_type: str = typer.Argument("cucina", help="cucina, vini or accoglienza"),
    menu_file: Path | None = typer.Option(None, "--menu", "-m", help="Menu JSON for context"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the note text here"),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all LLM prompts to prompt_logs/"),
) -> None:
    """Write the kitchen, wine service or hosting notes for a dinner."""
    from convivio.errors import ConvivioError
    from convivio.models.dinner import DinnerEvent
    from convivio.models.menu import MenuResponse
    from convivio.models.notes import DinnerNoteType
    from convivio.notes import export_note_text

    try:
        kind = DinnerNoteType(note_type.lower())
    except ValueError:
        console.print(f"[red]❌ Unknown note type {note_type!r}[/red]")
        raise typer.Exit(1)

    generator, _ = _setup(log_prompts)
    dinner = DinnerEvent.model_validate_json(dinner_file.read_text(encoding="utf-8"))
    menu = MenuResponse.from_blob(menu_file.read_bytes()) if menu_file else dinner.menu_response

    try:
        with Live(Spinner("dots", text=f"Generating {kind.display_name}..."), console=console, transient=True):
            content = asyncio.run(
                generator.generate_dinner_note(dinner, menu, kind, dinner.confirmed_wines)
            )
    except ConvivioError as e:
        console.print(f"\n[red]❌ {type(e).__name__}: {e}[/red]")
        raise typer.Exit(1)

    text = export_note_text(kind, content, dinner)
    if output is not None:
        output.write_text(text, encoding="utf-8")
        console.print(f"[green]{kind.display_name} written to {output}[/green]")
    else:
        console.print(text, markup=False)


@app.command()
def tasting(
    sheet_file: Path = typer.Argument(..., exists=True, help="AIS tasting sheet JSON"),
) -> None:
    """Score an AIS tasting sheet."""
    from pydantic import ValidationError

    from convivio.models.tasting import AISTastingSheet

    try:
        sheet = AISTastingSheet.model_validate_json(sheet_file.read_text(encoding="utf-8"))
    except ValidationError as e:
        console.print(f"[red]❌ Invalid tasting sheet: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Scheda AIS")
    table.add_column("Esame")
    table.add_column("Punti", justify="right")
    table.add_row("Visivo", str(sheet.visual_score))
    table.add_row("Olfattivo", str(sheet.olfactory_score))
    table.add_row("Gusto-olfattivo", str(sheet.taste_score))
    table.add_row("Considerazioni finali", str(sheet.final_score))
    table.add_row("Totale", f"{sheet.total_score}/100", style="bold")
    console.print(table)
    if not sheet.is_complete:
        console.print(f"[yellow]Scheda compilata al {sheet.completion:.0%}[/yellow]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Port"),
) -> None:
    """Run the HTTP backend (POST /propose, GET /health)."""
    import uvicorn

    from convivio.config import get_settings

    uvicorn.run(
        "convivio.web.app:app",
        host=host,
        port=port,
        log_level=get_settings().log_level.lower(),
    )


@app.command()
def health() -> None:
    """Check system health and configuration."""
    from convivio.config import get_settings

    console.print("\n[bold]Convivio Health Check[/bold]\n")

    try:
        settings = get_settings()
        console.print("✅ Configuration loaded")
        console.print(f"   Environment: {settings.convivio_env}")
        console.print(f"   Log level: {settings.log_level}")
        console.print(f"   Provider: {settings.llm_provider}")
    except Exception as e:
        console.print(f"\n[red]❌ Configuration error: {e}[/red]")
        console.print("[dim]Make sure you have a .env file with required variables.[/dim]")
        raise typer.Exit(1)

    if settings.has_completion_credential:
        console.print(f"✅ {settings.llm_provider} API key configured")
    else:
        console.print(f"❌ {settings.llm_provider.upper()}_API_KEY missing")
        raise typer.Exit(1)

    console.print("\n[green]All checks passed![/green]")


@app.command()
def version() -> None:
    """Show version information."""
    from convivio import __version__

    console.print(f"Convivio version {__version__}")


if __name__ == "__main__":
    app()
