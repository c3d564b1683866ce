"""Command line for the gametree engine."""


def main() -> None:
    """Console script entry point; typer is only imported when the CLI runs."""
    from .main import main as run

    run()


__all__ = ["main"]
