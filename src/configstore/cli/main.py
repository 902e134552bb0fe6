"""Main CLI entry point."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

import click

from configstore import __version__

from .commands import backup, check, convert, env, get, set_value, show

logger = logging.getLogger(__name__)

# Marks handlers installed by setup_logging so repeated calls replace them
_HANDLER_FLAG = "_configstore_cli"


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> None:
    """
    Configure logging for the command-line tool.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, log at DEBUG and write ./configstore-debug.log
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)
    """
    if debug or verbose >= 2:
        console_level = logging.DEBUG
    elif verbose == 1:
        console_level = logging.INFO
    else:
        console_level = logging.WARNING

    if debug and not log_file:
        log_file = Path.cwd() / "configstore-debug.log"
    file_level = logging.DEBUG if debug else getattr(logging, log_level.upper())

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_FLAG, False):
            root_logger.removeHandler(handler)
            handler.close()

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    handlers.append(console_handler)

    if log_file:
        # Rotating file handler (keeps last 5 files, max 10MB each)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for handler in handlers:
        setattr(handler, _HANDLER_FLAG, True)
        root_logger.addHandler(handler)
    root_logger.setLevel(min(handler.level for handler in handlers))

    logger.info(
        f"Logging configured: console={logging.getLevelName(console_level)}, file={log_file or 'none'}"
    )


@click.group()
@click.version_option(version=__version__, prog_name="configstore")
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug mode (DEBUG level, logs to ./configstore-debug.log)'
)
@click.option(
    '--log-file',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Write logs to this file'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default='INFO',
    help='Log level for file logging (default: INFO)'
)
def cli(verbose: int, debug: bool, log_file: Optional[Path], log_level: str):
    """
    configstore - inspect, edit and convert JSON/YAML configuration files.

    \b
    Examples:
      # Print a file in the default (plain text) format
      configstore show config.yaml

      # Read one value as JSON
      configstore get config.json db_port

      # Change a value (VALUE is parsed as JSON, else kept as a string)
      configstore set config.yaml db_port 6543

      # Convert JSON to YAML, keeping only two keys
      configstore convert config.json subset.yaml --keys db_host --keys db_port

      # Fail unless required keys are present
      configstore check config.yaml --require db_host --require api_endpoint
    """
    setup_logging(verbose, debug, log_file, log_level)


cli.add_command(show)
cli.add_command(get)
cli.add_command(set_value)
cli.add_command(convert)
cli.add_command(backup)
cli.add_command(check)
cli.add_command(env)

if __name__ == "__main__":
    cli()
