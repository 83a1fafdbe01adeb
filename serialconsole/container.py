"""Dependency container - holds all wired dependencies."""

from dataclasses import dataclass

from serialconsole.application.services import SessionController
from serialconsole.config import Config
from serialconsole.infrastructure.devices import PresetPortSelector, PySerialCapability


@dataclass(frozen=True)
class Container:
    """Immutable dependency container.

    All dependencies are wired at startup and cannot be modified.
    """

    # Services
    controller: SessionController

    # Infrastructure
    capability: PySerialCapability

    # Configuration
    config: Config

    @property
    def server_host(self) -> str:
        return self.config.server.host

    @property
    def server_port(self) -> int:
        return self.config.server.port

    @property
    def preset_selector(self) -> PresetPortSelector | None:
        """The selector when ports are chosen up front (server mode)."""
        selector = self.capability.selector
        return selector if isinstance(selector, PresetPortSelector) else None

    async def start(self) -> None:
        """Start hotplug watching and event dispatch."""
        await self.capability.start()
        await self.controller.start()

    async def stop(self) -> None:
        await self.controller.stop()
        await self.capability.stop()
