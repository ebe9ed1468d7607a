"""CLI entry point for the Spot host service."""

from dataclasses import asdict
from pathlib import Path

import click
import yaml

from spothost import __version__
from spothost.config import load_config
from spothost.errors import ConfigError
from spothost.logging import setup_logging


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to config file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log at DEBUG level.")
@click.pass_context
def main(ctx: click.Context, config: Path | None, verbose: bool) -> None:
    """Spot host - Pair remote controls with this room."""
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config)
        ctx.obj["logger"] = setup_logging(
            ctx.obj["config"], level="DEBUG" if verbose else None
        )
    except ConfigError as e:
        raise click.ClickException(str(e))


@main.command()
def version() -> None:
    """Show version."""
    click.echo(f"spothost version {__version__}")


@main.command("config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show the effective configuration."""
    config = ctx.obj["config"]
    click.echo(yaml.safe_dump(asdict(config), sort_keys=False).rstrip())


@main.command()
@click.option(
    "--rotations",
    "-n",
    type=click.IntRange(min=1),
    default=3,
    show_default=True,
    help="Number of join codes to publish before stopping.",
)
@click.option(
    "--interval",
    "-i",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds between rotations. Defaults to join_code.refresh_rate.",
)
@click.option("--qr", is_flag=True, help="Show each join code as a QR code.")
@click.pass_context
def simulate(
    ctx: click.Context, rotations: int, interval: float | None, qr: bool
) -> None:
    """Run the host against an in-memory channel and print join codes."""
    import asyncio

    from spothost.constants import ServiceUpdates
    from spothost.memory import InMemoryChannel
    from spothost.qr import JoinCodeQr
    from spothost.service import SpotTvControlService

    config = ctx.obj["config"]
    options = config.connect_options()
    if interval is not None:
        options.join_code_refresh_rate = interval
    if not options.join_code_refresh_rate:
        raise click.UsageError("Join code rotation is disabled; pass --interval.")

    show_qr = qr or config.join_code.display == "qr"

    async def _simulate():
        service = SpotTvControlService(InMemoryChannel())
        done = asyncio.Event()
        published = 0

        def on_join_code(update: dict) -> None:
            nonlocal published
            published += 1
            join_code = update["joinCode"]
            click.echo(f"Join code {published}/{rotations}: {join_code}")
            if show_qr:
                click.echo(JoinCodeQr(join_code).to_terminal())
            if published >= rotations:
                done.set()

        service.subscribe(ServiceUpdates.JOIN_CODE_CHANGE, on_join_code)

        try:
            await service.connect(options)
            await done.wait()
        finally:
            await service.disconnect()

    try:
        asyncio.run(_simulate())
    except KeyboardInterrupt:
        click.echo("\nStopped.")


if __name__ == "__main__":
    main()
