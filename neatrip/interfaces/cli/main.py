"""
CLI Main - Typer-based command-line interface.

Usage:
    neatrip init
    neatrip seed
    neatrip discover 38.72 -9.14 --radius 500
    neatrip itinerary "Kyoto" 3
    neatrip buddies --destination "Bali, Indonesia"
    neatrip serve
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from neatrip.config import NeatripError, get_settings

app = typer.Typer(
    name="neatrip",
    help="NeaTrip - Travel discovery and planning",
    add_completion=False,
)
console = Console()


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    console.print("\n[green]Starting NeaTrip API server[/green]")
    console.print(f"[dim]http://{host}:{port}[/dim]\n")

    uvicorn.run(
        "neatrip.interfaces.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
        log_level=settings.log_level.lower(),
    )


@app.command()
def init(
    db_path: Path | None = typer.Option(None, "--db", "-d", help="Database file"),
) -> None:
    """Create the data directory and database schema."""
    asyncio.run(_init_async(db_path))


async def _init_async(db_path: Path | None) -> None:
    """Async initialization."""
    from neatrip.adapters.sqlite import DocumentStore

    settings = get_settings()
    path = db_path or settings.db_path

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Initializing...", total=2)

        progress.update(task, description="Creating directories...")
        if db_path is None:
            settings.data_dir.mkdir(parents=True, exist_ok=True)
        path.parent.mkdir(parents=True, exist_ok=True)
        progress.advance(task)

        progress.update(task, description="Creating database schema...")
        store = DocumentStore(path)
        try:
            await store.initialize()
        finally:
            await store.close()
        progress.advance(task)

    console.print("\n[green]Initialization complete![/green]")
    console.print(f"[dim]Database: {path}[/dim]")


DEMO_PASSWORD = "Travel123"

DEMO_USERS = [
    {"email": "ana@example.com", "name": "Ana Silva", "username": "ana", "location": "Lisbon, Portugal"},
    {"email": "ben@example.com", "name": "Ben Okafor", "username": "ben", "location": "Lagos, Nigeria"},
    {"email": "mia@example.com", "name": "Mia Keller", "username": "mia", "location": "Zurich, Switzerland"},
]

DEMO_PLACES = [
    {
        "name": "Lake Bled",
        "description": "Glacial lake with a church on its island and a castle above the cliffs.",
        "category": "LAKE",
        "location": "Bled, Slovenia",
        "latitude": 46.3636,
        "longitude": 14.0938,
        "tags": ["lake", "hiking", "swimming"],
        "best_time_to_visit": "June to September",
        "media_urls": ["https://images.example.com/bled.jpg"],
    },
    {
        "name": "Pastéis de Belém",
        "description": "Bakery serving custard tarts from a recipe kept since 1837.",
        "category": "CAFE",
        "location": "Lisbon, Portugal",
        "latitude": 38.6975,
        "longitude": -9.2033,
        "tags": ["pastry", "coffee"],
        "opening_hours": {"monday": "08:00-23:00", "sunday": "08:00-22:00"},
        "media_urls": ["https://images.example.com/belem.jpg"],
    },
]


@app.command()
def seed(
    db_path: Path | None = typer.Option(None, "--db", "-d", help="Database file"),
) -> None:
    """Load demo users, places and posts. Safe to run again."""
    asyncio.run(_seed_async(db_path))


async def _seed_async(db_path: Path | None) -> None:
    from neatrip.adapters.sqlite import DocumentStore
    from neatrip.domains.accounts import hash_password
    from neatrip.domains.social import SocialService

    store = DocumentStore(db_path or get_settings().db_path)
    try:
        await store.initialize()
        social = SocialService(store)

        # Anything already present is reused, so seeding twice adds nothing
        users = []
        for data in DEMO_USERS:
            existing = await social.find_user_by_email(data["email"])
            users.append(
                existing
                or await social.create_user(password_hash=hash_password(DEMO_PASSWORD), **data)
            )

        places = []
        for data in DEMO_PLACES:
            existing = await store.find_one("places", {"name": data["name"]})
            places.append(
                await social.get_place(existing["id"])
                if existing
                else await social.create_place(**data)
            )

        ana, ben, mia = users
        if await store.exists("posts", {"authorId": ana.id}):
            console.print("[yellow]Demo data already present[/yellow]")
            return

        first = await social.create_post(
            ana.id,
            caption="Morning row to the island church",
            place_id=places[0].id,
            tags=["slovenia", "lakes"],
            media_urls=["https://images.example.com/bled-row.jpg"],
        )
        second = await social.create_post(
            ben.id,
            caption="Still warm from the oven",
            place_id=places[1].id,
            media_urls=["https://images.example.com/tarts.mp4"],
            is_reel=True,
        )
        await social.like_post(ben.id, first.id)
        await social.like_post(mia.id, second.id)
        await social.create_comment(mia.id, first.id, "Adding this to my list!")
        await social.follow_user(ben.id, ana.id)
        await social.follow_user(mia.id, ana.id)
        await social.save_place(mia.id, places[0].id)
    except NeatripError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)
    finally:
        await store.close()

    console.print(
        f"[green]Seeded[/green] {len(users)} users, {len(places)} places, 2 posts "
        f"[dim](password: {DEMO_PASSWORD})[/dim]"
    )


@app.command()
def discover(
    lat: float = typer.Argument(..., help="Latitude"),
    lng: float = typer.Argument(..., help="Longitude"),
    heading: float = typer.Option(0.0, "--heading", help="Compass heading"),
    radius: float | None = typer.Option(None, "--radius", "-r", help="Radius in metres"),
    category: str | None = typer.Option(None, "--category", "-c", help="Place category"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Maximum places"),
) -> None:
    """Generate nearby places for a position."""
    from pydantic import ValidationError as PydanticValidationError

    from neatrip.domains.discovery import DiscoveryRequest, discover_places

    try:
        request = DiscoveryRequest(
            location={"lat": lat, "lng": lng},
            heading=heading,
            radius=radius,
            category=category,
            limit=limit,
        )
    except PydanticValidationError as e:
        console.print(f"[red]Error:[/red] {e.errors()[0]['msg']}")
        raise typer.Exit(1)

    response = discover_places(request, default_radius=get_settings().discovery_default_radius_m)

    table = Table(title=f"{response.total} places within {response.radius:.0f} m")
    table.add_column("Name", style="cyan")
    table.add_column("Category")
    table.add_column("Distance", justify="right")
    table.add_column("Direction", justify="right")
    table.add_column("Rating", justify="right", style="green")

    for place in response.places:
        table.add_row(
            place.name,
            place.category.value,
            f"{place.distance} m",
            f"{place.direction}°",
            f"{place.rating:.1f}",
        )

    console.print(table)


@app.command()
def itinerary(
    destination: str = typer.Argument(..., help="Where to go"),
    days: int = typer.Argument(..., help="Trip length in days"),
    budget: str = typer.Option("moderate", "--budget", "-b", help="Budget level"),
    style: str = typer.Option("balanced", "--style", "-s", help="Travel style"),
    interest: list[str] = typer.Option([], "--interest", "-i", help="Interest (repeatable)"),
) -> None:
    """Plan a trip with the AI planner (canned plan if the AI is unavailable)."""
    asyncio.run(_itinerary_async(destination, days, budget, style, interest))


async def _itinerary_async(
    destination: str, days: int, budget: str, style: str, interests: list[str]
) -> None:
    from pydantic import ValidationError as PydanticValidationError

    from neatrip.adapters.llm import LLMService
    from neatrip.domains.itinerary import ItineraryPlanner, ItineraryRequest

    try:
        request = ItineraryRequest(
            destination=destination,
            duration=days,
            budget=budget,
            travel_style=style,
            interests=interests,
        )
    except PydanticValidationError as e:
        console.print(f"[red]Error:[/red] {e.errors()[0]['msg']}")
        raise typer.Exit(1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task("Planning...", total=None)
        plan = await ItineraryPlanner(LLMService()).plan(request)

    for day in plan.itinerary:
        lines = [
            f"[bold]{a.start_time}[/bold] {a.name} [dim]({a.duration}, {a.cost})[/dim]"
            for a in day.activities
        ]
        console.print(
            Panel(
                "\n".join(lines),
                title=f"Day {day.day} - {day.date}",
                subtitle=f"{day.total_duration} / {day.estimated_cost}",
            )
        )


@app.command()
def buddies(
    destination: str | None = typer.Option(None, "--destination", "-d", help="Destination"),
    query: str | None = typer.Option(None, "--query", "-q", help="Search name, location or bio"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Maximum buddies"),
) -> None:
    """Search travel buddies."""
    from neatrip.adapters.llm import LLMService
    from neatrip.domains.buddies import BuddyMatcher, BuddySearchRequest

    matcher = BuddyMatcher(LLMService())
    response = matcher.search(
        BuddySearchRequest(destination=destination, search_query=query, limit=limit)
    )

    table = Table(title=f"{response.total} travel buddies")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Age", justify="right")
    table.add_column("Location")
    table.add_column("Match", justify="right", style="green")

    for buddy in response.buddies:
        table.add_row(
            buddy.id, buddy.name, str(buddy.age), buddy.location, f"{buddy.match_score}%"
        )

    console.print(table)


@app.command()
def backup(
    path: Path = typer.Argument(..., help="Output JSON file"),
    db_path: Path | None = typer.Option(None, "--db", "-d", help="Database file"),
) -> None:
    """Write every collection to a JSON file."""
    asyncio.run(_backup_async(path, db_path))


async def _backup_async(path: Path, db_path: Path | None) -> None:
    from neatrip.adapters.sqlite import DocumentStore

    store = DocumentStore(db_path or get_settings().db_path)
    try:
        await store.initialize()
        path.write_text(await store.backup(), encoding="utf-8")
    finally:
        await store.close()

    console.print(f"[green]Backup written to[/green] {path}")


@app.command()
def restore(
    path: Path = typer.Argument(..., help="Backup JSON file"),
    db_path: Path | None = typer.Option(None, "--db", "-d", help="Database file"),
) -> None:
    """Replace the database contents with a backup."""
    if not path.exists():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)

    asyncio.run(_restore_async(path, db_path))


async def _restore_async(path: Path, db_path: Path | None) -> None:
    from neatrip.adapters.sqlite import DocumentStore

    store = DocumentStore(db_path or get_settings().db_path)
    try:
        await store.initialize()
        await store.restore(path.read_text(encoding="utf-8"))
    except NeatripError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)
    finally:
        await store.close()

    console.print(f"[green]Restored from[/green] {path}")


@app.command()
def version() -> None:
    """Show version information."""
    from neatrip import __version__

    console.print(f"NeaTrip v{__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
