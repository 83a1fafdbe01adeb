"""Domain entities."""

from .input_history import InputHistory
from .output_buffer import OUTPUT_BUFFER_MAX_LINES, OutputBuffer

__all__ = [
    "InputHistory",
    "OutputBuffer",
    "OUTPUT_BUFFER_MAX_LINES",
]
