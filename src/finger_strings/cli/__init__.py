"""Command-line interface package for FingerStrings."""

__all__ = ["main"]


def main(*args, **kwargs):
    """Entry point that defers heavy imports until needed."""
    from .main import main as cli_main

    return cli_main(*args, **kwargs)
