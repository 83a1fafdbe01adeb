"""Serial port detection for devices attached to the system."""

import sys

from serial.tools import list_ports

from serialconsole.domain import DeviceHandle


class SerialPortDetector:
    """Detect serial ports on the current platform."""

    def is_supported(self) -> bool:
        """Check that port enumeration works on this host."""
        try:
            list_ports.comports()
        except Exception:
            return False
        return True

    def detect_ports(self) -> list[DeviceHandle]:
        """Enumerate serial ports.

        Returns:
            Detected ports, sorted by path.
        """
        ports = [
            DeviceHandle(
                path=info.device,
                vendor_id=info.vid,
                product_id=info.pid,
                description=info.description or "",
            )
            for info in list_ports.comports()
        ]
        return sorted(ports, key=lambda p: p.path)

    def find(self, path: str) -> DeviceHandle | None:
        """Find a detected port by path."""
        for port in self.detect_ports():
            if port.path == path:
                return port
        return None

    def get_default_port(self, ports: list[DeviceHandle] | None = None) -> DeviceHandle | None:
        """Pick the most likely device port.

        USB ports matching the platform's usual naming win, then any USB
        port, then whatever was found first.
        """
        if ports is None:
            ports = self.detect_ports()
        if not ports:
            return None

        prefixes = self._get_platform_prefixes()
        usb_ports = [p for p in ports if p.vendor_id is not None]
        for port in usb_ports:
            if port.path.startswith(prefixes):
                return port
        if usb_ports:
            return usb_ports[0]
        return ports[0]

    def _get_platform_prefixes(self) -> tuple[str, ...]:
        """Get typical USB serial device prefixes for the current platform."""
        if sys.platform == "win32":
            return ("COM",)
        elif sys.platform == "darwin":
            return ("/dev/cu.usbmodem", "/dev/cu.usbserial", "/dev/cu.")
        return ("/dev/ttyACM", "/dev/ttyUSB")
