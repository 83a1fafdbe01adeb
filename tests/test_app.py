"""Tests for the HTTP and WebSocket surface."""

import pytest
from fastapi.testclient import TestClient

from serialconsole.app import create_app
from serialconsole.application.services import SessionController
from serialconsole.config import Config
from serialconsole.container import Container
from serialconsole.infrastructure.devices import PresetPortSelector


@pytest.fixture
def container(fake_capability):
    """Container wired to the fake capability."""
    fake_capability.selector = PresetPortSelector()
    controller = SessionController(fake_capability, baud_rate=9600)
    return Container(controller=controller, capability=fake_capability, config=Config())


@pytest.fixture
def client(container):
    """Test client with the application lifespan running."""
    with TestClient(create_app(container)) as test_client:
        yield test_client


class TestHttpApi:
    """Tests for the REST endpoints."""

    def test_health(self, client):
        """Test the health check."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "connected": False}

    def test_initial_state(self, client):
        """Test the state before connecting."""
        state = client.get("/api/state").json()

        assert state["state"] == "idle"
        assert state["connected"] is False
        assert state["baud_rate"] == 9600
        assert state["vendor_id"] == ""
        assert state["output"] == ""
        assert state["history"] == []

    def test_ports(self, client):
        """Test detected ports are listed with hex ids."""
        payload = client.get("/api/ports").json()

        assert payload["ports"] == [
            {
                "path": "/dev/ttyACM0",
                "vendor_id": "2341",
                "product_id": "0043",
                "description": "Arduino Uno",
            }
        ]
        assert 115200 in payload["baud_rates"]

    def test_connect_send_disconnect(self, client, fake_capability):
        """Test a full session over HTTP."""
        connected = client.post("/api/connect", json={"baud_rate": 57600}).json()
        assert connected["ok"] is True
        assert connected["state"] == "connected"
        assert connected["vendor_id"] == "2341"
        assert fake_capability.opened[0][1] == 57600

        assert client.post("/api/send", json={"text": "AT"}).json() == {"sent": True}
        assert fake_capability.port.sink.written == [b"AT\n"]

        disconnected = client.post("/api/disconnect").json()
        assert disconnected["state"] == "idle"
        assert client.get("/api/state").json()["history"] == ["AT"]

    def test_connect_with_port_sets_selector(self, client, fake_capability):
        """Test a port in the request is handed to the preset selector."""
        response = client.post("/api/connect", json={"port": "/dev/ttyUSB3"})

        assert response.status_code == 200
        assert fake_capability.selector.path == "/dev/ttyUSB3"

    def test_send_without_session(self, client):
        """Test sending while idle is a no-op."""
        assert client.post("/api/send", json={"text": "AT"}).json() == {"sent": False}

    def test_baud_rate_update(self, client):
        """Test the baud rate can change while idle."""
        response = client.put("/api/baud-rate", json={"baud_rate": 19200})

        assert response.status_code == 200
        assert response.json()["baud_rate"] == 19200

    def test_invalid_baud_rate(self, client):
        """Test a nonstandard baud rate is rejected."""
        response = client.put("/api/baud-rate", json={"baud_rate": 12345})

        assert response.status_code == 422

    def test_baud_rate_locked_while_connected(self, client):
        """Test the baud rate cannot change mid-session."""
        client.post("/api/connect", json={})

        response = client.put("/api/baud-rate", json={"baud_rate": 19200})

        assert response.status_code == 409

    def test_clear(self, client):
        """Test clearing the output."""
        client.post("/api/connect", json={})

        assert client.post("/api/clear").json() == {"status": "ok"}
        assert client.get("/api/state").json()["output"] == ""


class TestWebSocket:
    """Tests for the WebSocket endpoint."""

    def test_initial_messages_and_ping(self, client):
        """Test the snapshot is sent on accept and ping is answered."""
        with client.websocket_connect("/ws") as websocket:
            assert websocket.receive_json() == {"type": "output", "data": ""}
            status = websocket.receive_json()
            assert status["type"] == "status"
            assert status["state"] == "idle"

            websocket.send_json({"type": "ping"})
            assert websocket.receive_json() == {"type": "pong"}

    def test_connect_streams_status_and_output(self, client):
        """Test a connect message produces status and notice updates."""
        with client.websocket_connect("/ws") as websocket:
            websocket.receive_json()
            websocket.receive_json()

            websocket.send_json({"type": "connect"})
            states = []
            output = ""
            while "reading data" not in output:
                message = websocket.receive_json()
                if message["type"] == "status":
                    states.append(message["state"])
                else:
                    output += message["data"]

            assert states == ["connecting", "connected"]
            assert "baud rate 9600" in output
