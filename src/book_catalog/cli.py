"""Command line entry point for the book catalog service."""

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from book_catalog.core.exceptions import BootstrapError
from book_catalog.core.services import DbManageService
from book_catalog.runtime.context import get_config

console = Console()

app = typer.Typer(
    help="📚 Book Catalog service",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Host to bind (defaults to config)"),
    port: int | None = typer.Option(None, help="Port to bind (defaults to config)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """
    🚀 Start the HTTP server.

    Bootstraps the database unless SKIP_BOOTSTRAP is set, then serves the
    /api/books endpoints and the web UI.
    """
    import uvicorn

    app_config = get_config().app
    bind_host = host or app_config.host
    bind_port = port or app_config.port

    console.print(
        Panel.fit(
            "[bold green]Starting Book Catalog[/bold green]",
            border_style="green",
        )
    )
    console.print(f"[blue]API:[/blue] http://{bind_host}:{bind_port}/api/books")

    uvicorn.run(
        "book_catalog.api.http.app:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        access_log=False,
    )


@app.command()
def bootstrap() -> None:
    """
    🗄️  Create the database and books table if they are missing.
    """
    db_config = get_config().database
    try:
        DbManageService(db_config).bootstrap()
    except BootstrapError as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    console.print(f"[green]✅ Database ready:[/green] {db_config.describe()}")


@app.command(name="config")
def show_config() -> None:
    """
    🔧 Show the resolved configuration (secrets omitted).
    """
    config = get_config()
    table = Table(title="Book Catalog configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("environment", config.app.environment)
    table.add_row("server", f"{config.app.host}:{config.app.port}")
    table.add_row("static_dir", str(config.app.static_dir))
    table.add_row("database", config.database.describe())
    table.add_row("driver", config.database.driver)
    table.add_row("skip_bootstrap", str(config.database.skip_bootstrap))
    table.add_row("log_level", config.logging.level)

    console.print(table)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
