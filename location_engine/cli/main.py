import asyncio
import json
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from location_engine.config.logging_setup import setup_logging
from location_engine.engine import LocationEngine, create_engine
from location_engine.providers.errors import LocationEngineError, LocationNotFoundError
from location_engine.providers.models import Place

app = typer.Typer(help="Search places, nearby points of interest and addresses through Google Maps (SerpAPI)")
console = Console()


@app.callback()
def main(
    log_config: Optional[Path] = typer.Option(None, help="YAML logging configuration file"),
):
    """
    Location engine command line.
    """
    setup_logging(log_config)


def run_with_engine(operation: Callable[[LocationEngine], Awaitable[Any]]) -> Any:
    """
    Run one engine operation on a fresh engine and close it afterwards.

    Engine errors are printed in red and turned into a non-zero exit code.
    """
    async def runner():
        engine = create_engine()
        try:
            return await operation(engine)
        finally:
            await engine.close()

    try:
        return asyncio.run(runner())
    except LocationNotFoundError as e:
        console.print(f"[bold red]{e.message}")
        raise typer.Exit(code=2)
    except LocationEngineError as e:
        console.print(f"[bold red]Error: {e.message}")
        raise typer.Exit(code=1)


def print_json(result) -> None:
    typer.echo(json.dumps(result.model_dump(), ensure_ascii=False, indent=2))


def places_table(places: List[Place]) -> Table:
    table = Table(show_header=True, header_style="bold green")
    table.add_column("#")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Rating")
    table.add_column("Reviews")
    table.add_column("Distance")
    table.add_column("Score")
    table.add_column("Address")

    for index, place in enumerate(places, start=1):
        table.add_row(
            str(index),
            place.name,
            place.category,
            f"{place.rating:.1f}" if place.rating is not None else "-",
            str(place.review_count) if place.review_count is not None else "-",
            place.display_distance or "-",
            f"{place.relevance_score:.3f}",
            place.address or "-",
        )
    return table


@app.command()
def search(
    query: str = typer.Argument(..., help="Free-text query (ex: 'bún chả ngon')"),
    lat: Optional[float] = typer.Option(None, help="Latitude of the search origin"),
    lng: Optional[float] = typer.Option(None, help="Longitude of the search origin"),
    radius: Optional[float] = typer.Option(None, help="Search radius in meters"),
    limit: Optional[int] = typer.Option(None, help="Maximum number of places"),
    language: Optional[str] = typer.Option(None, help="Result language (ex: vi, en)"),
    open_now: bool = typer.Option(False, help="Only places open right now"),
    category: Optional[str] = typer.Option(None, help="Category override (skips classification)"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
):
    """
    Search places matching a free-text query.
    """
    result = run_with_engine(
        lambda engine: engine.search_places(
            query,
            latitude=lat,
            longitude=lng,
            radius_meters=radius,
            limit=limit,
            language=language,
            open_now=open_now,
            explicit_category=category,
        )
    )

    if as_json:
        print_json(result)
        return

    console.print(f"\n[bold]Results for [cyan]{result.resolved_query}[/]")
    console.print(f"Category: [cyan]{result.category or '-'}[/]")
    if not result.places:
        console.print("[yellow]No places found.")
    else:
        console.print(places_table(result.places))

    if result.suggestions:
        console.print("\n[bold]Related questions:")
        for suggestion in result.suggestions:
            console.print(f"  - {suggestion}")


@app.command()
def nearby(
    lat: float = typer.Argument(..., help="Latitude of the origin"),
    lng: float = typer.Argument(..., help="Longitude of the origin"),
    city: Optional[str] = typer.Option(None, help="City name used in the category queries"),
    category: Optional[List[str]] = typer.Option(None, help="Category to search (repeatable)"),
    radius: Optional[float] = typer.Option(None, help="Search radius in meters"),
    limit: Optional[int] = typer.Option(None, help="Maximum number of places"),
    language: Optional[str] = typer.Option(None, help="Result language (ex: vi, en)"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
):
    """
    Search several categories around a point and merge the results.
    """
    result = run_with_engine(
        lambda engine: engine.search_nearby_places(
            lat,
            lng,
            city=city,
            categories=category or None,
            radius_meters=radius,
            limit=limit,
            language=language,
        )
    )

    if as_json:
        print_json(result)
        return

    console.print(f"\n[bold]Nearby [cyan]{lat}, {lng}[/]")
    console.print(f"Categories: [cyan]{', '.join(result.categories)}[/]")
    if not result.places:
        console.print("[yellow]No places found.")
        return
    console.print(places_table(result.places))


@app.command()
def geocode(
    address: str = typer.Argument(..., help="Address or place name (ex: '36 Hàng Bạc')"),
    city: Optional[str] = typer.Option(None, help="City used to disambiguate"),
    country: Optional[str] = typer.Option(None, help="Country used to disambiguate"),
    language: Optional[str] = typer.Option(None, help="Result language (ex: vi, en)"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
):
    """
    Convert an address to coordinates.
    """
    result = run_with_engine(
        lambda engine: engine.geocode_address(
            address,
            city=city,
            country=country,
            language=language,
        )
    )

    if as_json:
        print_json(result)
        return

    console.print(f"\n[bold]{result.display_name}")
    console.print(f"Address: [cyan]{result.address or '-'}[/]")
    console.print(f"Coordinates: [cyan]{result.latitude}, {result.longitude}[/]")


if __name__ == "__main__":
    app()
