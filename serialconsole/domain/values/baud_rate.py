"""Baud rate value object."""

# Standard rates offered to the user
BAUD_RATES: tuple[int, ...] = (
    300,
    600,
    1200,
    2400,
    4800,
    9600,
    19200,
    38400,
    57600,
    115200,
    230400,
    460800,
    921600,
    1000000,
    1500000,
)

DEFAULT_BAUD_RATE = 115200


def validate_baud_rate(rate: int) -> int:
    """Return rate if it is one of the standard rates.

    Raises:
        ValueError: If rate is not a standard rate.
    """
    if rate not in BAUD_RATES:
        raise ValueError(f"Unsupported baud rate: {rate}")
    return rate
