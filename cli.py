"""CLI entrypoint (Typer).

Goal:
- Generate a plan from the terminal: `python cli.py generate --from India --to Canada`
- Print the normalized plan JSON and its task count
- List the required checklist categories: `python cli.py categories`
"""

from __future__ import annotations

import asyncio
import json
import logging
from enum import Enum
from typing import Optional

import typer

from settlesmart.agent.checklist import project
from settlesmart.agent.prompts import REQUIRED_CATEGORIES, OutputContract
from settlesmart.agent.workflow import generate_plan
from settlesmart.config import get_completion_config
from settlesmart.llm.client import CompletionClient
from settlesmart.llm.errors import CompletionError
from settlesmart.schemas import Plan, ProfileRequest

app = typer.Typer(help="SettleSmart relocation checklist CLI.")


class Endpoint(str, Enum):
    """Completion endpoints selectable from the command line."""
    CHAT = "chat"
    RESPONSES = "responses"


async def _run(
    request: ProfileRequest,
    contract: Optional[OutputContract],
    endpoint: Optional[Endpoint],
) -> Plan:
    client = CompletionClient(
        get_completion_config(),
        endpoint=endpoint.value if endpoint else None,
    )
    try:
        return await generate_plan(request, client, contract=contract)
    finally:
        await client.close()


@app.command()
def generate(
    origin: str = typer.Option("India", "--from", help="Country you are leaving"),
    destination: str = typer.Option("United States", "--to", help="Country you are moving to"),
    phase: str = typer.Option("after", help="'before' or 'after' arrival"),
    visa_type: str = typer.Option("work", "--visa", help="student, work, family or startup"),
    anchor_date: str = typer.Option("", "--date", help="Arrival or move date, YYYY-MM-DD"),
    contract: Optional[OutputContract] = typer.Option(None, help="Output contract override"),
    endpoint: Optional[Endpoint] = typer.Option(None, help="Completion endpoint override"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Generate a 4-week relocation checklist."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    request = ProfileRequest(
        phase=phase,
        origin=origin,
        destination=destination,
        visa_type=visa_type,
        anchor_date=anchor_date,
    )

    try:
        plan = asyncio.run(_run(request, contract, endpoint))
    except CompletionError as e:
        typer.echo(f"Error: {e.public_message}", err=True)
        raise typer.Exit(code=1)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(json.dumps(plan.to_wire(), indent=2, ensure_ascii=False))
    progress = project(plan)
    typer.echo(f"{progress.total_count} tasks across {len(plan.weeks)} weeks", err=True)


@app.command()
def categories():
    """List the checklist categories every plan must cover."""
    for category in REQUIRED_CATEGORIES:
        typer.echo(f"- {category}")


if __name__ == "__main__":
    app()
