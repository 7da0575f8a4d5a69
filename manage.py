import asyncio
import subprocess
from typing import Annotated

from rich import print
from rich.console import Console
from rich.table import Table
import typer

from app.core.config import settings
from app.core.enums import FormType
from app.core.exceptions.types import StorageException

app = typer.Typer()


async def init_db_task(database_url: str | None = None) -> None:
    """
    Create the quotes and contacts tables if they do not exist.

    Args:
        database_url: Database to initialize. Defaults to settings.DATABASE_URL.

    Raises:
        typer.Exit: If the database cannot be reached or the DDL fails.
    """
    from app.apps.website.storage import SQLSubmissionStore

    store = SQLSubmissionStore(database_url or settings.DATABASE_URL)
    print(f"[yellow]Creating tables on[/yellow] {store.engine.url.render_as_string()}")
    try:
        await store.init()
        print("[green]Tables created[/green]")
    except StorageException as e:
        print(f"[red]Error creating tables:[/red] {str(e)}")
        raise typer.Exit(1)
    finally:
        await store.close()


async def list_submissions_task(form_type: FormType, limit: int) -> list:
    """
    Read the most recent submissions from the configured store.

    Args:
        form_type: Which form's submissions to read.
        limit: Maximum number of submissions.

    Returns:
        list: Stored records, newest first.
    """
    from app.apps.website.storage import create_store

    store = create_store()
    await store.init()
    try:
        return await store.list_recent(form_type, limit)
    finally:
        await store.close()


@app.command()
def init_db(
    database_url: Annotated[
        str | None,
        typer.Option(help="Database URL. Defaults to DATABASE_URL."),
    ] = None,
):
    """
    Create the relational tables without going through Alembic.

    Handy for local SQLite databases; use `migrate` for PostgreSQL.
    """
    asyncio.run(init_db_task(database_url))


@app.command()
def makemigrations(comment: Annotated[str, typer.Argument()] = "auto"):
    """
    Creates a new Alembic migration revision with an autogenerated migration script.

    Args:
        comment (str, optional): The message to use for the migration revision. Defaults to "auto".
    """
    try:
        revision_command = f'alembic revision --autogenerate -m "{comment}"'
        print(f"Creating Alembic revision: {revision_command}")
        subprocess.run(revision_command, shell=True, check=True)
    except subprocess.CalledProcessError as e:
        print(f"[red]Error:[/red] {e}")
        raise
    print("[green]Migration revision created[/green]")


@app.command()
def migrate():
    """
    Runs the Alembic database migration to upgrade the schema to the latest version.
    """
    try:
        upgrade_command = "alembic upgrade head"
        print(f"Running Alembic upgrade: {upgrade_command}")
        subprocess.run(upgrade_command, shell=True, check=True)
    except subprocess.CalledProcessError as e:
        print(f"[red]Error:[/red] {e}")
        raise
    print("[green]Migration complete[/green]")


@app.command()
def list_submissions(
    form_type: Annotated[FormType, typer.Argument(help="quote or contact")],
    limit: Annotated[int, typer.Option("--limit", "-l", min=1)] = 20,
):
    """
    Print the most recent submissions of one form from the configured store.
    """
    records = asyncio.run(list_submissions_task(form_type, limit))
    if not records:
        print(f"[cyan]No {form_type.value} submissions found[/cyan]")
        return

    detail_column = "company" if form_type == FormType.QUOTE else "subject"
    table = Table(title=f"Recent {form_type.value} submissions")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column(detail_column.capitalize())
    table.add_column("Status")
    table.add_column("Timestamp")

    for record in records:
        table.add_row(
            record.id,
            record.name,
            getattr(record, detail_column),
            record.status.value,
            record.timestamp.isoformat(),
        )

    Console().print(table)


@app.command()
def run():
    try:
        server_command = (
            "uvicorn app.main:app --host 127.0.0.1 --port 8000 --reload"
            if settings.DEBUG
            else "uvicorn app.main:app --host 0.0.0.0 --port 8000"
        )
        print(f"Running FastAPI server: {server_command}")
        subprocess.run(server_command, shell=True, check=True)
    except subprocess.CalledProcessError as e:
        print(f"[red]Error:[/red] {e}")
        raise


if __name__ == "__main__":
    app()
