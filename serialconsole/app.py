"""FastAPI application exposing the session controller over HTTP and WebSocket."""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from typing import Any

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .composition import create_container
from .container import Container
from .domain import BAUD_RATES, ControllerSnapshot, DeviceInfo, SessionActiveError
from .logging_setup import setup_logging_from_env

logger = logging.getLogger(__name__)


class ConnectRequest(BaseModel):
    port: str | None = None
    baud_rate: int | None = None


class SendRequest(BaseModel):
    text: str


class BaudRateRequest(BaseModel):
    baud_rate: int


def snapshot_to_dict(snapshot: ControllerSnapshot) -> dict[str, Any]:
    """Serialize a controller snapshot for clients."""
    return {
        "state": snapshot.state.value,
        "connected": snapshot.connected,
        "baud_rate": snapshot.baud_rate,
        "vendor_id": DeviceInfo.format_id(snapshot.vendor_id),
        "product_id": DeviceInfo.format_id(snapshot.product_id),
        "device": snapshot.device_path,
    }


def create_app(container: Container | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        container: Wired dependencies. Built from the environment's config
            file at startup when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        if container is None:
            setup_logging_from_env()
            app.state.container = create_container()
        else:
            app.state.container = container

        await app.state.container.start()
        logger.info("Serial console server started")

        yield

        await app.state.container.stop()
        logger.info("Serial console server stopped")

    app = FastAPI(
        title="Serial Console",
        description="Serial device console over HTTP and WebSocket",
        version="0.1.0",
        lifespan=lifespan,
    )

    def get_container() -> Container:
        return app.state.container

    def state_payload() -> dict[str, Any]:
        controller = get_container().controller
        payload = snapshot_to_dict(controller.snapshot())
        payload["device_available"] = controller.device_available
        payload["max_lines"] = controller.max_lines
        return payload

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        controller = get_container().controller
        return {
            "status": "healthy",
            "connected": controller.connected,
        }

    @app.get("/api/state")
    async def get_state():
        """Connection state, rendered output and history."""
        controller = get_container().controller
        payload = state_payload()
        payload["output"] = controller.output
        payload["history"] = controller.history
        return payload

    @app.get("/api/ports")
    async def get_ports():
        """Detected serial ports and the selectable baud rates."""
        ports = await get_container().capability.list_ports()
        return {
            "ports": [
                {
                    "path": p.path,
                    "vendor_id": DeviceInfo.format_id(p.vendor_id),
                    "product_id": DeviceInfo.format_id(p.product_id),
                    "description": p.description,
                }
                for p in ports
            ],
            "baud_rates": list(BAUD_RATES),
        }

    @app.post("/api/connect")
    async def connect(request: ConnectRequest):
        """Open a port and start streaming its output."""
        container = get_container()
        controller = container.controller

        if request.port is not None:
            selector = container.preset_selector
            if selector is None:
                return JSONResponse(
                    {"error": "Port selection is not configurable"}, status_code=400
                )
            selector.path = request.port

        if request.baud_rate is not None:
            try:
                controller.baud_rate = request.baud_rate
            except SessionActiveError as e:
                return JSONResponse({"error": str(e)}, status_code=409)
            except ValueError as e:
                return JSONResponse({"error": str(e)}, status_code=422)

        connected = await controller.connect()
        payload = state_payload()
        payload["ok"] = connected
        return payload

    @app.post("/api/disconnect")
    async def disconnect():
        await get_container().controller.disconnect()
        return state_payload()

    @app.post("/api/send")
    async def send(request: SendRequest):
        """Send a command to the device."""
        sent = await get_container().controller.send(request.text)
        return {"sent": sent}

    @app.post("/api/clear")
    async def clear():
        get_container().controller.clear()
        return {"status": "ok"}

    @app.put("/api/baud-rate")
    async def set_baud_rate(request: BaudRateRequest):
        try:
            get_container().controller.baud_rate = request.baud_rate
        except SessionActiveError as e:
            return JSONResponse({"error": str(e)}, status_code=409)
        except ValueError as e:
            return JSONResponse({"error": str(e)}, status_code=422)
        return state_payload()

    @app.websocket("/ws")
    async def websocket_console(websocket: WebSocket):
        """Stream output and status, accept input messages."""
        await websocket.accept()
        controller = get_container().controller
        outgoing: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

        def on_output(chunk: str) -> None:
            outgoing.put_nowait({"type": "output", "data": chunk})

        def on_status(snapshot: ControllerSnapshot) -> None:
            outgoing.put_nowait({"type": "status", **snapshot_to_dict(snapshot)})

        logger.info("WebSocket accepted client=%s", getattr(websocket.client, "host", None))
        await websocket.send_json({"type": "output", "data": controller.output})
        await websocket.send_json({"type": "status", **snapshot_to_dict(controller.snapshot())})
        controller.add_output_listener(on_output)
        controller.add_status_listener(on_status)

        async def pump_outgoing() -> None:
            while True:
                await websocket.send_json(await outgoing.get())

        sender = asyncio.create_task(pump_outgoing())
        try:
            while True:
                message = await websocket.receive_json()
                msg_type = message.get("type")
                if msg_type == "input":
                    await controller.send(str(message.get("data", "")))
                elif msg_type == "connect":
                    await controller.connect()
                elif msg_type == "disconnect":
                    await controller.disconnect()
                elif msg_type == "clear":
                    controller.clear()
                elif msg_type == "ping":
                    outgoing.put_nowait({"type": "pong"})
                else:
                    logger.warning("Unknown message type type=%s", msg_type)
        except WebSocketDisconnect:
            logger.info("WebSocket client disconnected")
        except Exception:
            logger.exception("WebSocket error")
            with suppress(Exception):
                await websocket.close(code=1011)
        finally:
            controller.remove_output_listener(on_output)
            controller.remove_status_listener(on_status)
            sender.cancel()
            with suppress(asyncio.CancelledError, Exception):
                await sender

    return app
