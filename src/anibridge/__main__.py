"""Allow ``python -m anibridge``."""

from anibridge.cli.typer_app import run

if __name__ == "__main__":
    run()
