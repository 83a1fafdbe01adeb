"""Command line interface."""

import asyncio
import sys

from .args import parse_args


def run(argv: list[str] | None = None) -> None:
    """Parse arguments and run the console or the server."""
    from serialconsole.composition import create_container
    from serialconsole.config import load_config
    from serialconsole.infrastructure.devices import SerialPortDetector
    from serialconsole.logging_setup import setup_logging_from_env

    from .display import console, display_ports
    from .prompt import InteractivePortSelector
    from .stdin_lines import StdinLines
    from .terminal import TerminalConsole

    args = parse_args(argv)
    setup_logging_from_env(verbose=args.verbose)

    if args.list_ports:
        display_ports(SerialPortDetector().detect_ports())
        sys.exit(0)

    try:
        config = load_config(args.config)
    except ValueError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        sys.exit(2)

    update = {}
    if args.port:
        update["port"] = args.port
    if args.baud:
        update["baud_rate"] = args.baud
    if update:
        config = config.model_copy(update={"serial": config.serial.model_copy(update=update)})

    if args.serve:
        from .server import serve

        serve(config, host=args.host, port=args.http_port)
        return

    lines = StdinLines()
    selector = None if config.serial.port else InteractivePortSelector(lines)
    container = create_container(config=config, selector=selector)

    try:
        code = asyncio.run(TerminalConsole(container, lines).run())
    except KeyboardInterrupt:
        code = 130
    sys.exit(code)


__all__ = ["parse_args", "run"]
