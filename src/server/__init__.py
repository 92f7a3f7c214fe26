"""Websocket server broadcasting timer state to external renderers."""

from .config import ServerConfigurationError, StateServerConfig
from .service import StateServer

__all__ = [
    "ServerConfigurationError",
    "StateServerConfig",
    "StateServer",
]
