"""
ros2topics CLI - Command Line Interface

Usage:
    ros2topics list                          # list active topics
    ros2topics type <topic>                  # print topic type
    ros2topics find <type>                   # find topics by type
    ros2topics echo <topic> <type> [count]   # print messages as JSON
    ros2topics hz <topic> <type> [count]     # display publishing rate
    ros2topics pub <topic> <type> <json> [rate]
"""

import click
import logging
import signal
import yaml
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ros2topics import __version__

# Diagnostics and logs; command output goes to stdout through click.echo
console = Console(stderr=True)


def emit(line: str) -> None:
    """Print one line of command output verbatim."""
    click.echo(line)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@click.command(context_settings={
    "ignore_unknown_options": True,
    "allow_interspersed_args": False,
    "help_option_names": ["--help"],
})
@click.version_option(version=__version__, prog_name="ros2topics")
@click.option("--config", "-c", "config_path", type=click.Path(dir_okay=False),
              help="YAML config file (default: $ROS2TOPICS_CONFIG)")
@click.option("--node-name", help="Name of the temporary ROS2 node")
@click.option("--verbose", "-v", is_flag=True, help="Verbose logging")
@click.argument("argv", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def main(ctx: click.Context, argv: tuple, config_path: Optional[str],
         node_name: Optional[str], verbose: bool):
    """ros2topics - print information about ROS2 topics.

    \b
    Commands: echo, hz, type, list, pub, find (info, bw, delay: not implemented)
    """
    from ros2topics.commands.context import CommandContext
    from ros2topics.commands.dispatcher import dispatch
    from ros2topics.core.cancellation import CancellationToken
    from ros2topics.core.config import load_config

    try:
        config = load_config(config_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    if node_name:
        config.node_name = node_name
    if verbose:
        config.log_level = "DEBUG"

    configure_logging(config.log_level)

    middleware = (ctx.obj or {}).get("middleware")
    if middleware is None:
        from ros2topics.middleware.rclpy_backend import RclpyMiddleware
        middleware = RclpyMiddleware()

    token = CancellationToken()
    context = CommandContext(middleware=middleware, config=config, emit=emit, token=token)

    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: token.cancel())
    try:
        dispatch(argv, context)
    finally:
        signal.signal(signal.SIGINT, previous_handler)


if __name__ == "__main__":
    main()
