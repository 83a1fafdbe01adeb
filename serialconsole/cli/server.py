"""Run the HTTP/WebSocket server."""

import uvicorn

from serialconsole.app import create_app
from serialconsole.composition import create_container
from serialconsole.config import Config

from .display import console


def serve(config: Config, host: str | None = None, port: int | None = None) -> None:
    """Serve the console API until interrupted."""
    container = create_container(config=config)
    app = create_app(container)

    bind_host = host or config.server.host
    bind_port = port or config.server.port
    console.print(
        f"[bold cyan]Serial Console[/bold cyan] serving on http://{bind_host}:{bind_port}"
    )
    uvicorn.run(app, host=bind_host, port=bind_port, log_config=None)
