"""CLI application for jot using Rich and Typer."""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from jot.core.config import setup_logging
from jot.core.errors import JotError
from jot.core.settings import ConfigStore
from jot.core.store import ThreadStore
from jot.core.types import Thread, ThreadMetadata
from jot.host.dispatcher import Dispatcher
from jot.host.session import HostClient
from jot.install import SUPPORTED_BROWSERS, InstallError, install_manifest

app = typer.Typer(
    name="jot",
    help="Jot CLI - inspect and manage page comment threads in your vault",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Show or change where threads are stored")
app.add_typer(config_app, name="config")

console = Console()


def _get_store(config_file: Optional[str]) -> ThreadStore:
    """Build a store, optionally against a non-default config file."""
    return ThreadStore(ConfigStore(Path(config_file).expanduser() if config_file else None))


def _format_ms(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M")


def _fail(error: JotError) -> None:
    console.print(f"[red]{error.code}: {error.message}[/red]")
    raise typer.Exit(1)


def print_thread(thread: Thread) -> None:
    """Print a thread and its comments."""
    header = thread.title or thread.url
    console.print(
        Panel.fit(
            f"[bold]{header}[/bold]\n[dim]{thread.url}[/dim]",
            title="Thread",
            border_style="blue",
        )
    )
    if not thread.comments:
        console.print("[dim]No comments.[/dim]")
        return
    for comment in thread.comments:
        console.print(
            f"[cyan]{_format_ms(comment.created_at)}[/cyan] [dim]({comment.id})[/dim]"
        )
        console.print(Markdown(comment.body))
        console.print()


ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to config file (default: ~/.jot/config.json or $JOT_CONFIG_DIR)",
)


@config_app.command("show")
def config_show(config_file: Optional[str] = ConfigOption):
    """Show the current vault configuration."""
    store = _get_store(config_file)
    config = store.get_config()
    if config is None:
        console.print("[yellow]Not configured. Run: jot config set <vault path>[/yellow]")
        raise typer.Exit(1)

    table = Table(title="Config", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Config file", str(store.config_store.config_file))
    table.add_row("Vault", config.vault_path)
    table.add_row("Comment folder", config.comment_folder)
    table.add_row("Notes", str(store.config_store.comments_dir()))
    table.add_row("Index", str(store.config_store.index_path()))
    console.print(table)


@config_app.command("set")
def config_set(
    vault_path: str = typer.Argument(..., help="Existing vault directory"),
    folder: Optional[str] = typer.Option(
        None, "--folder", "-f", help="Subfolder for thread notes (default: Jot)"
    ),
    config_file: Optional[str] = ConfigOption,
):
    """Point jot at a vault directory."""
    store = _get_store(config_file)
    try:
        config = store.set_config(vault_path, folder)
    except JotError as e:
        _fail(e)
    console.print(
        f"[green]Saved: notes go to {Path(config.vault_path) / config.comment_folder}[/green]"
    )


@app.command()
def threads(
    limit: int = typer.Option(50, "--limit", "-n", help="Maximum threads to list"),
    config_file: Optional[str] = ConfigOption,
):
    """List threads, newest first (also repairs the index)."""
    all_threads = _get_store(config_file).get_all_threads()
    if not all_threads:
        console.print("[dim]No threads yet.[/dim]")
        return

    table = Table(title=f"Threads ({len(all_threads)})", show_header=True)
    table.add_column("Updated", style="dim")
    table.add_column("Title")
    table.add_column("URL", style="cyan")
    table.add_column("#", justify="right")
    for thread in all_threads[:limit]:
        table.add_row(
            _format_ms(thread.updated_at),
            thread.title or "",
            thread.url,
            str(len(thread.comments)),
        )
    console.print(table)


@app.command()
def show(
    url: str = typer.Argument(..., help="Page URL"),
    config_file: Optional[str] = ConfigOption,
):
    """Show the thread for a URL."""
    thread = _get_store(config_file).get_thread(url)
    if thread is None:
        console.print(f"[yellow]No thread for {url}[/yellow]")
        raise typer.Exit(1)
    print_thread(thread)


@app.command()
def add(
    url: str = typer.Argument(..., help="Page URL"),
    text: str = typer.Argument(..., help="Comment text"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Page title"),
    config_file: Optional[str] = ConfigOption,
):
    """Append a comment to a URL's thread."""
    store = _get_store(config_file)
    try:
        thread = store.append_comment(url, text, ThreadMetadata(title=title))
    except JotError as e:
        _fail(e)
    console.print(f"[green]Added comment ({len(thread.comments)} total)[/green]")


@app.command()
def delete(
    url: str = typer.Argument(..., help="Page URL"),
    comment: Optional[str] = typer.Option(
        None, "--comment", help="Delete only this comment id"
    ),
    config_file: Optional[str] = ConfigOption,
):
    """Delete a thread, or a single comment with --comment."""
    store = _get_store(config_file)
    try:
        if comment:
            thread = store.delete_comment(url, comment)
            console.print(f"[green]Deleted comment, {len(thread.comments)} left[/green]")
        else:
            store.delete_thread(url)
            console.print("[green]Deleted thread[/green]")
    except JotError as e:
        _fail(e)


@app.command()
def request(
    request_type: str = typer.Argument(..., metavar="TYPE", help="Request type, e.g. ping"),
    params: Optional[str] = typer.Argument(None, help="Request params as a JSON object"),
    spawn: bool = typer.Option(
        False, "--spawn", help="Send through a jot-host subprocess over stdio"
    ),
    config_file: Optional[str] = ConfigOption,
):
    """Send one protocol request and print the response."""
    try:
        payload = json.loads(params) if params else {}
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid params JSON: {e}[/red]")
        raise typer.Exit(2)
    if not isinstance(payload, dict):
        console.print("[red]Params must be a JSON object[/red]")
        raise typer.Exit(2)

    if spawn:
        client = HostClient.spawn([sys.executable, "-m", "jot.main"])
        try:
            response = client.request(request_type, **payload).to_wire()
        finally:
            client.close()
    else:
        dispatcher = Dispatcher(_get_store(config_file))
        response = dispatcher.dispatch({"id": 1, "type": request_type, **payload}).to_wire()

    console.print_json(data=response)
    raise typer.Exit(0 if response["ok"] else 1)


@app.command("install-manifest")
def install_manifest_command(
    extension_id: List[str] = typer.Option(
        ..., "--extension-id", "-e", help="Allowed extension id (repeatable)"
    ),
    browser: str = typer.Option(
        "chrome", "--browser", "-b", help=f"One of: {', '.join(SUPPORTED_BROWSERS)}"
    ),
    host_path: Optional[str] = typer.Option(
        None, "--host-path", help="Host executable (default: jot-host on PATH)"
    ),
):
    """Register jot-host with the browser's native messaging."""
    try:
        path = install_manifest(
            extension_id,
            host_path=Path(host_path).expanduser() if host_path else None,
            browser=browser,
        )
    except InstallError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Manifest written to {path}[/green]")
    console.print("[dim]Restart the browser to pick it up.[/dim]")


@app.command()
def host(
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """Run the native messaging host on stdin/stdout."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
            stream=sys.stderr,
        )
    else:
        setup_logging()

    from jot.host.server import run_host

    run_host()


if __name__ == "__main__":
    app()
