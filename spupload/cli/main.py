"""spupload CLI - upload files to SharePoint from the command line."""
import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, DownloadColumn, Progress, TaskProgressColumn, TextColumn, TransferSpeedColumn

app = typer.Typer(
    name="spupload",
    help="Chunked file uploads to SharePoint",
    add_completion=False
)
console = Console()


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def build_credentials(
    client_id: Optional[str],
    client_secret: Optional[str],
    realm: Optional[str],
    token: Optional[str]
) -> Dict[str, Any]:
    """Assemble credential material from the command line options."""
    if token:
        return {'access_token': token}
    if client_id and client_secret:
        credentials = {'client_id': client_id, 'client_secret': client_secret}
        if realm:
            credentials['realm'] = realm
        return credentials
    return {}


@app.callback()
def main_callback(
    debug: bool = typer.Option(False, "--debug", help="Show diagnostic logging"),
):
    """Chunked file uploads to SharePoint."""
    if debug:
        from spupload import setup_logging
        logging.basicConfig(format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        setup_logging(logging.DEBUG)


@app.command()
def upload(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="File to upload"),
    url: str = typer.Option(..., "--url", "-u", envvar="SPUPLOAD_URL", help="Destination folder URL"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Name of the file in SharePoint"),
    folder: Optional[str] = typer.Option(None, "--folder", "-f", help="Folder relative to the site, overrides the URL folder"),
    client_id: Optional[str] = typer.Option(None, "--client-id", envvar="SPUPLOAD_CLIENT_ID", help="App-only client id"),
    client_secret: Optional[str] = typer.Option(None, "--client-secret", envvar="SPUPLOAD_CLIENT_SECRET", help="App-only client secret"),
    realm: Optional[str] = typer.Option(None, "--realm", envvar="SPUPLOAD_REALM", help="Tenant realm (discovered if omitted)"),
    token: Optional[str] = typer.Option(None, "--token", envvar="SPUPLOAD_TOKEN", help="Bearer access token"),
    chunk_size_mb: int = typer.Option(16, "--chunk-size-mb", min=1, help="Chunk size in MiB"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Deadline for the whole upload, in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print a line per chunk"),
):
    """Upload a file, overwriting any file with the same name."""
    from spupload import ClientConfig, SharePointUploader, SharePointUploadError

    credentials = build_credentials(client_id, client_secret, realm, token)
    if not credentials:
        console.print("[red]Provide --token or --client-id and --client-secret[/red]")
        raise typer.Exit(1)

    config = ClientConfig(chunk_size=chunk_size_mb * 1024 * 1024)

    async def do_upload():
        with Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            console=console,
            disable=verbose
        ) as progress:
            task = progress.add_task(name or file.name, total=file.stat().st_size)

            def on_progress(update):
                progress.update(task, completed=update.bytes_transferred)

            async with SharePointUploader(
                url,
                credentials,
                verbose=verbose,
                logger=console.print if verbose else None,
                config=config
            ) as sp:
                return await sp.upload(
                    file,
                    file_name=name,
                    folder=folder,
                    progress_callback=on_progress,
                    timeout=timeout
                )

    try:
        result = run_async(do_upload())
    except SharePointUploadError as e:
        console.print(f"[red]Upload failed: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except asyncio.TimeoutError:
        console.print(f"[red]Upload did not finish within {timeout}s[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Uploaded {escape(result.server_relative_url)} ({result.size_mb:.2f} MB)[/green]")


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
