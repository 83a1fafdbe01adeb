"""Application services - use case implementations."""

from .codec_pipe import InboundPipe, OutboundPipe, TextReader, TextWriter
from .connection_session import ConnectionSession
from .session_controller import SessionController

__all__ = [
    "ConnectionSession",
    "SessionController",
    "InboundPipe",
    "OutboundPipe",
    "TextReader",
    "TextWriter",
]
