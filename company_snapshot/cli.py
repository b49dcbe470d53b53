"""CLI entry point: research one company and email the snapshot report."""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler

from company_snapshot.agent import SnapshotAgent
from company_snapshot.config import load_config
from company_snapshot.errors import SnapshotError
from company_snapshot.models import ResearchRequest

console = Console()


@click.command()
@click.argument("company_name", required=False)
@click.option("--to", "recipient_email", default=None, help="Email address that receives the report")
@click.option("--handle", default=None, help="LinkedIn company username (defaults to a guess from the name)")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(company_name, recipient_email, handle, verbose):
    """Build a Company Snapshot Report for COMPANY_NAME and email it."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, show_time=False)],
    )

    config = load_config()
    agent = SnapshotAgent.from_config(config)
    request = ResearchRequest(
        company_name=company_name,
        social_handle=handle,
        recipient_email=recipient_email,
    )

    try:
        result = agent.run(request)
    except SnapshotError as e:
        console.print(f"[bold red]Snapshot failed:[/bold red] {e}")
        sys.exit(1)

    console.print(f"[bold green]{result['message']}[/bold green]")


if __name__ == "__main__":
    main()
