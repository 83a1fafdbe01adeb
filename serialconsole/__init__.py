"""Serial Console - browse and talk to serial devices from a terminal or browser."""

__version__ = "0.1.0"


def main() -> None:
    """Entry point for the ``serialconsole`` command."""
    from serialconsole.cli import run

    run()
