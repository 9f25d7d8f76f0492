"""Command line interface of contact-store (``contact-store`` console script)."""

from pathlib import Path

# Directory searched for db.yaml; resolved by the app callback before any command runs.
CONFIG_PATH: Path | None = None


def main() -> None:
    from contact_store.cli.app import main as run_app

    run_app()


__all__ = ["CONFIG_PATH", "main"]
