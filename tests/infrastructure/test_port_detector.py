"""Tests for SerialPortDetector."""

import sys
from types import SimpleNamespace

import pytest

from serialconsole.domain import DeviceHandle
from serialconsole.infrastructure.devices import SerialPortDetector
from serialconsole.infrastructure.devices import port_detector


def _port_info(device, vid=None, pid=None, description="n/a"):
    return SimpleNamespace(device=device, vid=vid, pid=pid, description=description)


@pytest.fixture
def fake_comports(monkeypatch):
    """Replace pyserial's port enumeration with a fixed list."""
    infos = [
        _port_info("/dev/ttyUSB0", 0x10C4, 0xEA60, "CP2102 USB to UART"),
        _port_info("/dev/ttyS0"),
        _port_info("/dev/ttyACM0", 0x2341, 0x0043, "Arduino Uno"),
    ]
    monkeypatch.setattr(port_detector.list_ports, "comports", lambda: list(infos))
    return infos


class TestSerialPortDetector:
    """Tests for SerialPortDetector."""

    def test_detect_ports_sorted_by_path(self, fake_comports):
        """Test ports are converted and sorted."""
        ports = SerialPortDetector().detect_ports()

        assert [p.path for p in ports] == ["/dev/ttyACM0", "/dev/ttyS0", "/dev/ttyUSB0"]
        assert ports[0] == DeviceHandle("/dev/ttyACM0", 0x2341, 0x0043, "Arduino Uno")

    def test_ports_without_usb_ids(self, fake_comports):
        """Test built-in ports carry no vendor or product id."""
        port = SerialPortDetector().find("/dev/ttyS0")

        assert port is not None
        assert port.vendor_id is None
        assert port.product_id is None

    def test_find_unknown_path(self, fake_comports):
        """Test find returns None for a missing path."""
        assert SerialPortDetector().find("/dev/ttyUSB9") is None

    def test_is_supported(self, fake_comports):
        """Test enumeration success means support."""
        assert SerialPortDetector().is_supported() is True

    def test_not_supported_when_enumeration_fails(self, monkeypatch):
        """Test an enumeration error means no support."""

        def broken():
            raise OSError("no sysfs")

        monkeypatch.setattr(port_detector.list_ports, "comports", broken)

        assert SerialPortDetector().is_supported() is False

    def test_default_prefers_platform_usb_port(self, fake_comports, monkeypatch):
        """Test the usual Linux USB naming wins."""
        monkeypatch.setattr(sys, "platform", "linux")

        default = SerialPortDetector().get_default_port()

        assert default is not None
        assert default.path == "/dev/ttyACM0"

    def test_default_falls_back_to_any_usb_port(self, monkeypatch):
        """Test a USB port with unusual naming is still preferred."""
        monkeypatch.setattr(sys, "platform", "win32")
        ports = [DeviceHandle("/dev/ttyS0"), DeviceHandle("/dev/rfcomm0", 0x0A12, 0x0001)]

        default = SerialPortDetector().get_default_port(ports)

        assert default == ports[1]

    def test_default_without_ports(self):
        """Test no ports means no default."""
        assert SerialPortDetector().get_default_port([]) is None

    @pytest.mark.parametrize(
        "platform,expected",
        [
            ("win32", "COM"),
            ("darwin", "/dev/cu.usbmodem"),
            ("linux", "/dev/ttyACM"),
        ],
    )
    def test_platform_prefixes(self, monkeypatch, platform, expected):
        """Test each platform has its usual prefixes."""
        monkeypatch.setattr(sys, "platform", platform)

        assert expected in SerialPortDetector()._get_platform_prefixes()
