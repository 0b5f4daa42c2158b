"""CLI interface for sftpsync."""

import logging
from typing import Any, Optional

import click

from .cli_progress import SyncProgressDisplay
from .client import SftpSyncClient
from .config import DEFAULT_PORT, config
from .exceptions import SftpSyncError, TransportError
from .output import OutputFormatter
from .sync.modes import SyncDirection
from .sync.observer import CompositeSyncObserver, LoggingSyncObserver
from .sync.state import SyncHistoryStore
from .transport import open_ssh_client
from .utils import format_timestamp

logger = logging.getLogger(__name__)


@click.group()
@click.option("--host", "-H", help="Remote SFTP host")
@click.option("--port", "-p", type=int, default=None, help="Remote SSH port")
@click.option("--username", "-u", help="Remote user name")
@click.option("--password", "-P", help="Remote password")
@click.option(
    "--key-file",
    "-i",
    type=click.Path(dir_okay=False),
    help="Private key file for authentication",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="sftpsync")
@click.pass_context
def main(
    ctx: Any,
    host: Optional[str],
    port: Optional[int],
    username: Optional[str],
    password: Optional[str],
    key_file: Optional[str],
    quiet: bool,
    verbose: bool,
) -> None:
    """sftpsync - Push and pull directory trees over SFTP."""
    # Store settings in context for subcommands to access
    ctx.ensure_object(dict)
    ctx.obj["connection"] = {
        "host": host,
        "port": port,
        "username": username,
        "password": password,
        "key_file": key_file,
    }
    ctx.obj["out"] = OutputFormatter(quiet=quiet)

    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("sftpsync").setLevel(logging.DEBUG)
        # paramiko is very chatty at DEBUG
        logging.getLogger("paramiko").setLevel(logging.WARNING)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.option("--host", "-H", prompt="Remote host", help="Remote SFTP host")
@click.option(
    "--port", "-p", type=int, default=DEFAULT_PORT, prompt="Port", help="SSH port"
)
@click.option("--username", "-u", prompt="Username", help="Remote user name")
@click.option(
    "--password",
    "-P",
    prompt="Password (leave empty to use a key file)",
    default="",
    hide_input=True,
    show_default=False,
    help="Remote password",
)
@click.option(
    "--key-file",
    "-i",
    default="",
    help="Private key file for authentication",
)
@click.option("--no-verify", is_flag=True, help="Save without testing the connection")
@click.pass_context
def init(
    ctx: Any,
    host: str,
    port: int,
    username: str,
    password: str,
    key_file: str,
    no_verify: bool,
) -> None:
    """Initialize sftpsync configuration.

    Stores the connection settings in ~/.config/sftpsync/config.
    """
    out: OutputFormatter = ctx.obj["out"]

    if not no_verify:
        out.info(f"Connecting to {username}@{host}:{port}...")
        try:
            client = open_ssh_client(
                host,
                username,
                password=password or None,
                port=port,
                key_file=key_file or None,
                max_retries=0,
            )
            client.close()
            out.success("✓ Connection successful")
        except TransportError as e:
            out.error(f"Connection failed: {e}")
            if not click.confirm("Save configuration anyway?", default=False):
                out.warning("Configuration cancelled.")
                ctx.exit(1)

    try:
        config_path = config.save(
            host=host,
            port=str(port),
            username=username,
            password=password or None,
            key_file=key_file or None,
        )
    except SftpSyncError as e:
        out.error(f"Initialization failed: {e}")
        ctx.exit(1)
        return

    out.success(f"✓ Configuration saved successfully to {config_path}")


def _run_sync(
    ctx: Any,
    direction: SyncDirection,
    remote_path: str,
    local_path: str,
    delete: bool,
    exclude: tuple[str, ...],
    show_skipped: bool,
) -> None:
    """Run a push or pull pass and report the outcome."""
    out: OutputFormatter = ctx.obj["out"]
    connection = ctx.obj["connection"]
    display = SyncProgressDisplay(out, show_skips=show_skipped)

    if not config.is_configured() and not (
        connection["host"] and connection["username"]
    ):
        out.error(
            "No remote host configured. Run 'sftpsync init' or pass --host and "
            "--username."
        )
        ctx.exit(1)
        return

    try:
        client = SftpSyncClient(
            observer=CompositeSyncObserver(LoggingSyncObserver(), display),
            exclude=exclude,
            **connection,
        )
        if direction is SyncDirection.PUSH:
            out.info(f"Pushing {local_path} -> {client.host}:{remote_path}")
        else:
            out.info(f"Pulling {client.host}:{remote_path} -> {local_path}")
        if delete:
            out.info("Stale destination entries will be deleted")

        with display:
            stats = client.sync(direction, remote_path, local_path, delete=delete)
    except SftpSyncError as e:
        out.error(str(e))
        ctx.exit(1)
        return
    except KeyboardInterrupt:
        out.warning("Sync cancelled by user")
        ctx.exit(130)
        return

    out.print("")
    out.success("Sync complete!")
    if stats["transfers"] or stats["deletes"]:
        out.info(f"  Transferred: {stats['transfers']}")
        if stats["deletes"]:
            out.info(f"  Deleted: {stats['deletes']}")
        out.info(f"  Unchanged: {stats['skips']}")
    else:
        out.info("No changes needed - everything is in sync!")


@main.command()
@click.argument("remote_path")
@click.argument("local_path", type=click.Path(file_okay=False))
@click.option(
    "--delete",
    "-d",
    is_flag=True,
    help="Delete remote files that are not present locally",
)
@click.option(
    "--exclude",
    "-e",
    multiple=True,
    help="Entry name to leave out of the sync (repeatable)",
)
@click.option("--show-skipped", is_flag=True, help="List unchanged files too")
@click.pass_context
def push(
    ctx: Any,
    remote_path: str,
    local_path: str,
    delete: bool,
    exclude: tuple[str, ...],
    show_skipped: bool,
) -> None:
    """Upload LOCAL_PATH to REMOTE_PATH.

    Examples:
        sftpsync push /var/www/site ./site
        sftpsync push /var/www/site ./site --delete
    """
    _run_sync(
        ctx, SyncDirection.PUSH, remote_path, local_path, delete, exclude, show_skipped
    )


@main.command()
@click.argument("remote_path")
@click.argument("local_path", type=click.Path(file_okay=False))
@click.option(
    "--delete",
    "-d",
    is_flag=True,
    help="Delete local files that are not present remotely",
)
@click.option(
    "--exclude",
    "-e",
    multiple=True,
    help="Entry name to leave out of the sync (repeatable)",
)
@click.option("--show-skipped", is_flag=True, help="List unchanged files too")
@click.pass_context
def pull(
    ctx: Any,
    remote_path: str,
    local_path: str,
    delete: bool,
    exclude: tuple[str, ...],
    show_skipped: bool,
) -> None:
    """Download REMOTE_PATH to LOCAL_PATH.

    Examples:
        sftpsync pull /var/www/site ./site
        sftpsync pull /var/www/site ./site --delete
    """
    _run_sync(
        ctx, SyncDirection.PULL, remote_path, local_path, delete, exclude, show_skipped
    )


@main.command()
@click.argument("local_path", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--direction",
    "-D",
    type=click.Choice([d.value for d in SyncDirection]),
    default=None,
    help="Only show one direction",
)
@click.pass_context
def history(ctx: Any, local_path: str, direction: Optional[str]) -> None:
    """Show the sync history stored in LOCAL_PATH."""
    out: OutputFormatter = ctx.obj["out"]
    store = SyncHistoryStore()

    try:
        sync_history = store.load(local_path)
    except SftpSyncError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    directions = (
        [SyncDirection.from_string(direction)] if direction else list(SyncDirection)
    )
    for sync_direction in directions:
        records = sync_history.records(sync_direction)
        if not records:
            out.info(f"No {sync_direction.value} history.")
            continue
        rows = [
            [
                path,
                format_timestamp(record.local_mtime),
                format_timestamp(record.remote_mtime),
            ]
            for path, record in sorted(records.items())
        ]
        out.table(
            f"{sync_direction.value.capitalize()} history",
            ["Remote path", "Local mtime", "Remote mtime"],
            rows,
        )


if __name__ == "__main__":
    main()
