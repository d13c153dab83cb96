"""Typer CLI for Ophelia Market."""

from datetime import datetime, timezone
from typing import Optional

import typer
from rich.console import Console

app = typer.Typer(name="ophelia", help="Ophelia Market: handcrafted marketplace with certified listings")
console = Console()


def _parse_timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        console.print(f"[bold red]Error:[/bold red] not an ISO-8601 timestamp: {value}")
        raise typer.Exit(2)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind host (default: OPHELIA_HOST)"),
    port: Optional[int] = typer.Option(None, help="Bind port (default: OPHELIA_PORT)"),
):
    """Start the Ophelia Market API server."""
    import uvicorn
    from ophelia_market.app import create_app
    from ophelia_market.common.config import get_settings

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    console.print(f"[bold green]Starting Ophelia Market on {host}:{port}[/bold green]")
    uvicorn.run(create_app(settings), host=host, port=port)


@app.command("issue-hash")
def issue_hash(
    product_id: str = typer.Argument(..., help="Product id to certify"),
    issuer_id: str = typer.Argument(..., help="Issuing user id"),
    timestamp: Optional[str] = typer.Option(None, help="Issue time (ISO-8601), defaults to now"),
):
    """Compute a certificate hash offline (no DB required)."""
    from ophelia_market.common.config import get_settings
    from ophelia_market.certify.hasher import canonical_timestamp, generate_certificate_hash

    settings = get_settings()
    issued_at = _parse_timestamp(timestamp) if timestamp else datetime.now(timezone.utc)
    token = generate_certificate_hash(
        product_id,
        issuer_id,
        issued_at,
        settings.current_hmac_key,
        version=settings.current_hmac_version,
    )
    console.print(f"[bold]{token}[/bold]")
    console.print(f"  Issued at: {canonical_timestamp(issued_at)}")


@app.command("verify-hash")
def verify_hash(
    certificate_hash: str = typer.Argument(..., help="Certificate hash to check"),
    product_id: str = typer.Argument(..., help="Product id on the certificate"),
    issuer_id: str = typer.Argument(..., help="Issuer id on the certificate"),
    timestamp: str = typer.Argument(..., help="Issue time on the certificate (ISO-8601)"),
):
    """Verify a certificate hash offline (HMAC check only)."""
    from ophelia_market.common.config import get_settings
    from ophelia_market.certify.hasher import verify_certificate_hash

    settings = get_settings()
    if verify_certificate_hash(
        certificate_hash, product_id, issuer_id, _parse_timestamp(timestamp), settings.hmac_keyring,
    ):
        console.print("[bold green]VALID[/bold green] — hash matches the certificate record")
    else:
        console.print("[bold red]INVALID[/bold red] — hash does not match any signing key")
        raise typer.Exit(1)


@app.command()
def health(
    url: str = typer.Option("http://localhost:8080", help="Server URL"),
):
    """Check Ophelia Market server health."""
    import httpx

    try:
        resp = httpx.get(f"{url}/health", timeout=5)
        data = resp.json()
        console.print(f"[bold green]{data['status']}[/bold green] — v{data['version']}")
    except (httpx.HTTPError, ValueError, KeyError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
