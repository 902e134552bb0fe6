"""Allow ``python -m configstore``."""

from configstore.cli.main import cli

if __name__ == "__main__":
    cli()
