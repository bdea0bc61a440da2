"""CLI commands for wedding RSVP management."""

import asyncio

import typer

from src.config.settings import settings
from src.guests.dtos import RSVPLinkDTO
from src.guests.repository.read_models import SqlRSVPReadModel
from src.guests.tokens import get_token_codec

app = typer.Typer(help="CLI commands for wedding RSVP management")


@app.command()
def rsvp_link(
    guest_id: int = typer.Argument(..., help="Guest id"),
    event_id: int = typer.Argument(..., help="Event id the guest is invited to"),
    base_url: str = typer.Option(
        settings.frontend_url,
        "--base-url",
        "-b",
        help="Frontend URL the link points at",
    ),
):
    """Print a signed RSVP link for one guest."""
    codec = get_token_codec()
    link = codec.generate_rsvp_link(base_url, guest_id, event_id)

    typer.secho(f"RSVP URL: {link}", fg=typer.colors.CYAN)


@app.command()
def verify_token(
    token: str = typer.Argument(..., help="Token taken from an RSVP link"),
):
    """Check a token and show who it was issued to."""
    payload = get_token_codec().verify_token(token)
    if payload is None:
        typer.secho("Invalid or expired RSVP link", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Token is valid", fg=typer.colors.GREEN)
    typer.secho(f"  Guest ID: {payload.guest_id}", fg=typer.colors.BLUE)
    typer.secho(f"  Event ID: {payload.event_id}", fg=typer.colors.BLUE)
    typer.secho(f"  Issued at (ms): {payload.timestamp}", fg=typer.colors.CYAN)


async def _generate_links(event_id: int, base_url: str) -> list[RSVPLinkDTO]:
    codec = get_token_codec()
    guests = await SqlRSVPReadModel().get_guests_by_event(event_id)
    return [
        RSVPLinkDTO(
            guest_id=guest.id,
            name=guest.name,
            rsvp_link=codec.generate_rsvp_link(base_url, guest.id, event_id),
            email=guest.email,
            phone=guest.phone,
        )
        for guest in guests
    ]


@app.command()
def generate_links(
    event_id: int = typer.Argument(..., help="Event id"),
    base_url: str = typer.Option(
        settings.frontend_url,
        "--base-url",
        "-b",
        help="Frontend URL the links point at",
    ),
):
    """Print a signed RSVP link for every guest of an event."""
    # Typer doesn't support async directly, so use asyncio.run
    links = asyncio.run(_generate_links(event_id, base_url))

    if not links:
        typer.secho(f"No guests found for event {event_id}", fg=typer.colors.YELLOW)
        raise typer.Exit(1)

    typer.secho(f"{len(links)} RSVP links for event {event_id}", fg=typer.colors.GREEN)
    for link in links:
        contact = link.email or link.phone or "no contact details"
        typer.secho(f"  {link.name} ({contact})", fg=typer.colors.BLUE)
        typer.secho(f"    {link.rsvp_link}", fg=typer.colors.CYAN)


if __name__ == "__main__":
    app()
