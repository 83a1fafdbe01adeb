"""Composition root - the ONLY place where dependencies are wired."""

from pathlib import Path

from serialconsole.application.services import SessionController
from serialconsole.config import Config, load_config
from serialconsole.container import Container
from serialconsole.infrastructure.devices import (
    PortSelector,
    PresetPortSelector,
    PySerialCapability,
    SerialPortDetector,
)


def create_container(
    config_path: Path | str | None = None,
    selector: PortSelector | None = None,
    config: Config | None = None,
) -> Container:
    """Create the dependency container with all wired dependencies.

    Args:
        config_path: Path to config file.
        selector: How a device is chosen on connect. Defaults to the port
            named in the config.
        config: Already loaded configuration, skips reading config_path.

    Returns:
        Fully wired dependency container.
    """
    if config is None:
        config = load_config(config_path)

    if selector is None:
        selector = PresetPortSelector(config.serial.port)

    capability = PySerialCapability(
        selector=selector,
        detector=SerialPortDetector(),
        poll_interval=config.serial.hotplug_poll_interval,
    )

    controller = SessionController(
        capability,
        baud_rate=config.serial.baud_rate,
        max_lines=config.console.max_lines,
        max_history=config.console.max_history,
        encoding=config.serial.encoding,
        line_ending=config.serial.line_ending,
        fault_policy=config.serial.stream_fault_policy,
    )

    return Container(
        controller=controller,
        capability=capability,
        config=config,
    )
